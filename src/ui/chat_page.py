"""NiceGUI chat interface with NDJSON streaming support."""

import json

from nicegui import ui

from src.chat.client import ChatController, RelayClient
from src.chat.store import (
    Conversation,
    Message,
    MessageRole,
    Reaction,
    clear_conversation,
    delete_message,
    export_conversation,
    export_filename,
    new_conversation,
    react_to_message,
    select_conversation,
)
from src.ui.markdown import markdown_to_html, plain_text_to_html

CUSTOM_CSS = """
<link href="https://fonts.googleapis.com/css2?family=Inter:wght@400;500;600&display=swap"
      rel="stylesheet">
<style>
    * { font-family: 'Inter', sans-serif; }

    body { background: #f5f5f5; min-height: 100vh; }

    .app-container {
        background: white;
        border-radius: 12px;
        box-shadow: 0 2px 8px rgba(0, 0, 0, 0.1);
        overflow: hidden;
    }

    .header { background: linear-gradient(135deg, #0f766e 0%, #115e59 100%); }

    .message-user {
        background: linear-gradient(135deg, #0f766e 0%, #115e59 100%);
        color: white;
        border-radius: 18px 18px 4px 18px;
    }

    .message-assistant {
        background: #f3f4f6;
        color: #1f2937;
        border-radius: 18px 18px 18px 4px;
    }

    .avatar-user { background: linear-gradient(135deg, #0f766e 0%, #115e59 100%); }
    .avatar-assistant { background: #6b7280; }

    .typing-dot {
        width: 8px; height: 8px;
        background: #0f766e;
        border-radius: 50%;
        animation: bounce 1.4s infinite ease-in-out;
    }
    .typing-dot:nth-child(2) { animation-delay: 0.2s; }
    .typing-dot:nth-child(3) { animation-delay: 0.4s; }

    @keyframes bounce {
        0%, 60%, 100% { transform: translateY(0); }
        30% { transform: translateY(-6px); }
    }

    .conversation-item { border-radius: 8px; cursor: pointer; }
    .conversation-item:hover { background: #f3f4f6; }
    .conversation-active { background: #ccfbf1; }

    .input-box {
        background: #f9fafb;
        border: 1px solid #e5e7eb;
        border-radius: 12px;
        transition: border-color 0.2s;
    }
    .input-box:focus-within { border-color: #0f766e; }

    .send-btn { background: linear-gradient(135deg, #0f766e 0%, #115e59 100%) !important; }

    /* Markdown styling */
    .message-assistant strong { font-weight: 600; }
    .message-assistant em { font-style: italic; }
    .message-assistant code { font-family: 'Menlo', 'Monaco', monospace; }
    .message-assistant a { color: #0f766e; }
</style>
"""


@ui.page("/")
def chat_page() -> None:
    """Main chat page."""
    ui.add_head_html(CUSTOM_CSS)
    controller = ChatController(RelayClient())

    input_field: ui.textarea
    send_btn: ui.button

    def render_avatar(is_user: bool) -> None:
        css = "avatar-user" if is_user else "avatar-assistant"
        icon = "person" if is_user else "smart_toy"
        avatar_classes = f"w-9 h-9 rounded-full flex items-center justify-center {css}"
        with ui.element("div").classes(avatar_classes):
            ui.icon(icon).classes("text-white text-lg")

    def render_typing() -> None:
        with ui.row().classes("items-center gap-1 py-1"):
            for _ in range(3):
                ui.element("div").classes("typing-dot")

    def render_actions(msg: Message) -> None:
        liked = msg.reaction is Reaction.LIKE
        disliked = msg.reaction is Reaction.DISLIKE
        with ui.row().classes("gap-0"):
            ui.button(
                icon="content_copy", on_click=lambda: copy_message(msg.content)
            ).props("flat dense round size=sm color=grey")
            ui.button(
                icon="thumb_up", on_click=lambda: react(msg.id, Reaction.LIKE)
            ).props(f"flat dense round size=sm color={'teal' if liked else 'grey'}")
            ui.button(
                icon="thumb_down", on_click=lambda: react(msg.id, Reaction.DISLIKE)
            ).props(f"flat dense round size=sm color={'red' if disliked else 'grey'}")
            ui.button(
                icon="delete", on_click=lambda: remove(msg.id)
            ).props("flat dense round size=sm color=grey")

    def render_message(msg: Message) -> None:
        is_user = msg.role is MessageRole.USER
        align = "justify-end" if is_user else "justify-start"
        bubble = "message-user" if is_user else "message-assistant"

        with ui.row().classes(f"w-full {align} gap-3 items-end"):
            if not is_user:
                render_avatar(False)
            with ui.column().classes("max-w-[70%] gap-1"):
                with ui.element("div").classes(f"px-4 py-3 {bubble}"):
                    if is_user:
                        content = plain_text_to_html(msg.content)
                    else:
                        content = markdown_to_html(msg.content)
                    if content:
                        ui.html(content, sanitize=False).classes("text-sm leading-relaxed")
                    if msg.is_streaming:
                        render_typing()
                with ui.row().classes(
                    f"items-center gap-2 {'self-end' if is_user else 'self-start'}"
                ):
                    ui.label(msg.timestamp.strftime("%I:%M %p")).classes(
                        "text-[10px] text-gray-400"
                    )
                    if not is_user and msg.is_complete:
                        render_actions(msg)
            if is_user:
                render_avatar(True)

    def render_conversation_item(conv: Conversation) -> None:
        active = conv.id == controller.store.active_id
        css = "conversation-item px-3 py-2 w-full"
        if active:
            css += " conversation-active"
        with ui.column().classes(f"{css} gap-0").on(
            "click", lambda: switch_to(conv.id)
        ):
            ui.label(conv.title).classes("text-sm font-medium text-gray-700")
            ui.label(
                f"{len(conv.messages)} messages · {conv.last_activity.strftime('%I:%M %p')}"
            ).classes("text-[11px] text-gray-400")

    @ui.refreshable
    def sidebar() -> None:
        for conv in controller.store.conversations:
            render_conversation_item(conv)

    @ui.refreshable
    def session_badge() -> None:
        conv = controller.store.active
        session_id = conv.session_id if conv and conv.session_id else None
        ui.label(session_id[:8].upper() if session_id else "NO SESSION").classes(
            "text-xs text-white/80 font-mono"
        )

    @ui.refreshable
    def messages_view() -> None:
        conv = controller.store.active
        if conv is None or not conv.messages:
            with ui.column().classes("w-full h-64 items-center justify-center gap-3"):
                ui.icon("forum").classes("text-5xl text-gray-300")
                ui.label("Start a conversation").classes("text-lg text-gray-400")
            return
        for msg in conv.messages:
            render_message(msg)

    def refresh() -> None:
        messages_view.refresh()
        sidebar.refresh()
        session_badge.refresh()
        if controller.is_busy:
            send_btn.disable()
        else:
            send_btn.enable()

    controller.on_change = refresh

    async def send_message() -> None:
        text = input_field.value.strip()
        if not text or controller.is_busy:
            return
        input_field.value = ""
        await controller.send(text)

    def copy_message(content: str) -> None:
        ui.clipboard.write(content)
        ui.notify("Copied to clipboard")

    def react(message_id: str, reaction: Reaction) -> None:
        controller.update(react_to_message(controller.store, message_id, reaction))

    def remove(message_id: str) -> None:
        controller.update(delete_message(controller.store, message_id))

    def switch_to(conversation_id: str) -> None:
        if controller.is_busy:
            ui.notify("Wait for the current answer to finish", type="warning")
            return
        controller.update(select_conversation(controller.store, conversation_id))

    def new_chat() -> None:
        if controller.is_busy:
            return
        controller.update(new_conversation(controller.store))

    def clear_chat() -> None:
        if controller.is_busy:
            return
        controller.update(clear_conversation(controller.store))

    def download_chat() -> None:
        exported = export_conversation(controller.store)
        conv = controller.store.active
        if exported is None or conv is None:
            return
        ui.download.content(
            json.dumps(exported, indent=2, ensure_ascii=False),
            export_filename(conv),
        )

    # === UI Layout ===
    with ui.left_drawer(value=True).classes("bg-white p-3").props("width=260 bordered"):
        ui.button("New conversation", icon="add", on_click=new_chat).props(
            "unelevated no-caps color=teal"
        ).classes("w-full mb-3")
        with ui.column().classes("w-full gap-1"):
            sidebar()

    with (
        ui.element("div").classes("w-full min-h-screen p-4 md:p-8"),
        ui.column().classes("w-full max-w-3xl mx-auto app-container").style(
            "height: calc(100vh - 4rem)"
        ),
    ):
        # Header
        with ui.row().classes("w-full header px-5 py-4 items-center justify-between"):
            with ui.row().classes("items-center gap-3"):
                ui.icon("smart_toy").classes("text-white text-3xl")
                ui.label("Collection Assistant").classes("text-lg font-semibold text-white")
            with ui.row().classes("items-center gap-2"):
                with ui.element("div").classes(
                    "bg-white/20 rounded-full px-3 py-1 flex items-center gap-2"
                ):
                    ui.icon("tag").classes("text-white/80 text-sm")
                    session_badge()
                ui.button(icon="download", on_click=download_chat).props(
                    "flat round color=white"
                )
                ui.button(icon="delete_sweep", on_click=clear_chat).props(
                    "flat round color=white"
                )

        # Messages
        with (
            ui.scroll_area().classes("flex-grow w-full bg-gray-50"),
            ui.column().classes("w-full p-5 gap-4"),
        ):
            messages_view()

        # Input
        with ui.row().classes("w-full p-4 gap-3 items-end bg-white border-t"):
            with ui.element("div").classes("flex-grow input-box px-3 py-2"):
                input_field = (
                    ui.textarea(placeholder="Ask a question...")
                    .props("autogrow borderless dense rows=1")
                    .classes("w-full")
                    .on("keydown.enter.prevent", send_message)
                )
            send_btn = (
                ui.button(icon="send", on_click=send_message)
                .props("round unelevated")
                .classes("send-btn")
            )


def main() -> None:
    ui.run(title="Collection Assistant", port=8080, reload=False)


if __name__ == "__main__":
    main()
