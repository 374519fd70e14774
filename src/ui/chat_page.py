"""NiceGUI chat page with streamed replies."""

import logging

from fastapi import Request
from nicegui import Client, ui
from nicegui.events import ValueChangeEventArguments

from src.client.backend import BackendClient
from src.client.config import (
    AVAILABLE_MODELS,
    SessionConfig,
    describe_backend_location,
    get_client_settings,
    is_local_host,
    resolve_base_url,
)
from src.client.controller import ChatController
from src.client.session import ChatSession
from src.models.schemas import ConversationTurn
from src.ui import presenter

logger = logging.getLogger(__name__)

CUSTOM_CSS = """
<style>
    body { background: #f5f5f5; min-height: 100vh; }

    .app-container {
        background: white;
        border-radius: 12px;
        box-shadow: 0 2px 8px rgba(0, 0, 0, 0.1);
        overflow: hidden;
    }

    .header { background: linear-gradient(135deg, #667eea 0%, #764ba2 100%); }

    .message-user {
        background: linear-gradient(135deg, #667eea 0%, #764ba2 100%);
        color: white;
        border-radius: 18px 18px 4px 18px;
    }

    .message-assistant {
        background: #f3f4f6;
        color: #1f2937;
        border-radius: 18px 18px 18px 4px;
    }

    .message-text { white-space: pre-wrap; word-break: break-word; }

    .banner-warning { background: #fef3c7; color: #92400e; border-radius: 8px; }
    .banner-error { background: #fee2e2; color: #991b1b; border-radius: 8px; }

    .send-btn { background: linear-gradient(135deg, #667eea 0%, #764ba2 100%) !important; }
</style>
"""


@ui.page("/")
def chat_page(request: Request, client: Client) -> None:
    """Main chat page. Each page load gets its own session and controller."""
    ui.add_head_html(CUSTOM_CSS)

    settings = get_client_settings()
    page_url = str(request.url)
    local_host = is_local_host(request.url.hostname)

    session = ChatSession()
    config = SessionConfig.from_settings(settings)
    backend = BackendClient(
        resolve_base_url(settings, page_url),
        request_timeout=settings.request_timeout,
        health_timeout=settings.health_timeout,
    )
    controller = ChatController(
        session,
        config,
        backend,
        settings,
        backend_location=describe_backend_location(settings, page_url),
    )
    logger.info(f"New chat page using backend {backend.base_url}")

    scroll_area: ui.scroll_area
    input_field: ui.input
    send_btn: ui.button
    turn_labels: dict[str, ui.label] = {}
    rendered_layout: tuple = ()

    def message_layout() -> tuple:
        active = session.active_turn
        return (
            tuple(turn.turn_id for turn in session.turns),
            active.turn_id if active else None,
            session.show_thinking,
        )

    def render_turn(turn: ConversationTurn) -> None:
        active = session.active_turn is turn
        with ui.row().classes(f"w-full {presenter.row_alignment(turn.role)}"):
            with ui.column().classes("max-w-[75%] gap-1"):
                with ui.element("div").classes(f"px-4 py-3 {presenter.bubble_class(turn.role)}"):
                    with ui.row().classes("items-center gap-1"):
                        ui.icon(presenter.role_icon(turn.role)).classes("text-sm")
                        ui.label(presenter.role_label(turn.role)).classes("text-xs font-semibold")
                    turn_labels[turn.turn_id] = ui.label(presenter.turn_text(turn, active)).classes(
                        "message-text text-sm leading-relaxed"
                    )
                ui.label(turn.time).classes("text-[10px] text-gray-400")

    @ui.refreshable
    def banners() -> None:
        warning = presenter.offline_warning(
            session.backend_status, local_host, settings.backend_start_command
        )
        if warning:
            with ui.row().classes("w-full banner-warning px-4 py-2 items-center gap-2"):
                ui.icon("warning")
                ui.label(warning).classes("text-sm")
        error = presenter.error_text(session.transport_state, session.error)
        if error:
            with ui.row().classes("w-full banner-error px-4 py-2 items-center gap-2"):
                ui.icon("error")
                ui.label(error).classes("text-sm")

    @ui.refreshable
    def chat_header_actions() -> None:
        if session.turns:
            ui.button("Clear Chat", icon="delete_sweep", on_click=controller.clear).props(
                "flat dense color=white"
            )

    @ui.refreshable
    def messages() -> None:
        nonlocal rendered_layout
        rendered_layout = message_layout()
        turn_labels.clear()
        if not session.turns:
            with ui.column().classes("w-full h-64 items-center justify-center gap-3"):
                ui.icon("forum").classes("text-5xl text-gray-300")
                ui.label(presenter.EMPTY_STATE_TEXT).classes("text-lg text-gray-400")
            return

        for turn in session.turns:
            render_turn(turn)

        if session.show_thinking:
            with ui.row().classes("w-full justify-start"):
                with ui.element("div").classes("message-assistant px-4 py-3"):
                    ui.label(presenter.THINKING_TEXT).classes("text-sm text-gray-500 italic")

    def update_controls() -> None:
        state = session.transport_state
        send_btn.set_enabled(controller.can_submit(input_field.value))
        send_btn.props(f"icon={presenter.send_icon(state)}")
        input_field.set_enabled(not presenter.input_locked(state))

    def update_active_turn() -> None:
        active = session.active_turn
        if active is not None and active.turn_id in turn_labels:
            turn_labels[active.turn_id].set_text(presenter.turn_text(active, is_active=True))

    def on_session_change() -> None:
        banners.refresh()
        chat_header_actions.refresh()
        # Streamed chunks only touch the live reply label.
        if message_layout() == rendered_layout:
            update_active_turn()
        else:
            messages.refresh()
        update_controls()
        scroll_area.scroll_to(percent=1.0)

    def clear_input() -> None:
        input_field.value = ""

    async def send_message() -> None:
        await controller.submit(input_field.value, on_accepted=clear_input)

    def on_api_key_change(e: ValueChangeEventArguments) -> None:
        config.api_key = e.value or ""
        update_controls()

    # === UI Layout ===
    with (
        ui.element("div").classes("w-full min-h-screen p-4 md:p-8"),
        ui.column().classes("w-full max-w-3xl mx-auto app-container gap-0"),
    ):
        # Header
        with ui.row().classes("w-full header px-5 py-4 items-center"):
            ui.icon("chat").classes("text-white text-3xl")
            ui.label("AI Chat").classes("text-lg font-semibold text-white")

        # Settings
        with ui.column().classes("w-full px-5 py-4 gap-2"):
            ui.input(
                "OpenAI API Key",
                placeholder="Enter your OpenAI API key",
                password=True,
                password_toggle_button=True,
                on_change=on_api_key_change,
            ).classes("w-full").mark("api-key")
            ui.select(list(AVAILABLE_MODELS), label="Model").bind_value(
                config, "model"
            ).classes("w-full")
            ui.textarea(
                "System/Developer Message",
                placeholder="Enter system message (e.g., 'You are a helpful assistant')",
            ).props("rows=3").bind_value(config, "developer_message").classes("w-full")

        with ui.column().classes("w-full px-5 gap-2"):
            banners()

        # Chat header
        with ui.row().classes("w-full header px-5 py-2 mt-4 items-center justify-between"):
            ui.label("Chat").classes("text-base font-semibold text-white")
            chat_header_actions()

        # Messages
        with ui.scroll_area().classes("w-full h-96 bg-gray-50") as scroll_area:
            with ui.column().classes("w-full p-5 gap-4"):
                messages()

        # Input
        with ui.row().classes("w-full p-4 gap-3 items-center bg-white border-t"):
            input_field = (
                ui.input(
                    placeholder="Type your message here...",
                    on_change=lambda _: update_controls(),
                )
                .props("outlined dense")
                .classes("flex-grow")
                .on("keydown.enter", send_message)
                .mark("message-input")
            )
            send_btn = (
                ui.button(icon="send", on_click=send_message)
                .props("round unelevated")
                .classes("send-btn")
                .mark("send")
            )

    update_controls()
    unsubscribe = session.subscribe(on_session_change)

    def on_delete() -> None:
        controller.cancel()
        unsubscribe()

    # Disconnects may be followed by a reconnect; only deletion ends the page.
    client.on_delete(on_delete)
    ui.timer(0.1, controller.check_backend, once=True)
