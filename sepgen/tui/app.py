"""Full-screen prompt_toolkit application for phone provisioning.

This provides a single-screen editor: the form on the left, a live preview
of the generated XML on the right, and contextual help below. Up/Down move
between fields, Enter edits the field under the cursor, Ctrl+S saves and
Ctrl+Q quits.
"""

from __future__ import annotations

from typing import Any, Callable, Optional

from prompt_toolkit import Application
from prompt_toolkit.buffer import Buffer
from prompt_toolkit.data_structures import Point
from prompt_toolkit.filters import Condition
from prompt_toolkit.formatted_text import FormattedText, HTML
from prompt_toolkit.key_binding import KeyBindings
from prompt_toolkit.layout import (
    BufferControl,
    FormattedTextControl,
    HSplit,
    Layout,
    VSplit,
    Window,
)
from prompt_toolkit.layout.containers import ScrollOffsets
from prompt_toolkit.layout.controls import UIContent, UIControl
from prompt_toolkit.layout.dimension import Dimension as D
from prompt_toolkit.mouse_events import MouseEvent, MouseEventType
from prompt_toolkit.styles import Style
from prompt_toolkit.widgets import Frame, TextArea

from sepgen.lib.errors import ProvisioningError
from sepgen.lib.identity import destination_name, is_valid_identity
from sepgen.tui.constants import IDENTITY_TAG
from sepgen.tui.models.field import Field, FieldKind
from sepgen.tui.models.navigation import is_selectable
from sepgen.tui.models.session import ConfigSession
from sepgen.tui.settings import TUISettings

LABEL_WIDTH = 22

# Application style
STYLE = Style.from_dict({
    "title": "bold bg:#005f87 #ffffff",
    "section-header": "bold underline #00af00",
    "field-label": "#d7d700",
    "field-label.required": "#d7d700 bold",
    "field-value": "#ffffff",
    "field-value.empty": "#606060 italic",
    "field.focused": "bg:#303030",
    "field-input": "bg:#1e1e1e #ffffff",
    "help-panel": "bg:#1c1c1c #a0a0a0",
    "help": "#808080 italic",
    "xml-preview": "bg:#1c1c1c #d0d0d0",
    "status-bar": "bg:#005f87 #ffffff",
    "button": "bg:#404040 #ffffff",
    "button.focused": "bg:#0087af #ffffff bold",
    "quit-prompt": "bg:#5f0000 #ffffff",
    # Dropdown styles
    "dropdown": "#808080",
    "dropdown.selected": "bold #00ff00",
    "dropdown.hover": "bg:#404040 #ffffff",
    "dropdown.focused": "#d0d0d0",
})


class FieldListControl(UIControl):
    """The form itself: one line per visible field.

    Hidden fields are skipped entirely; the cursor line is highlighted and
    reported as the cursor position so the window scrolls to keep it in view.
    """

    def __init__(self, session: ConfigSession, on_click: Callable[[int], None]):
        self.session = session
        self.on_click = on_click
        self._row_indices: list[int] = []

    def create_content(self, width: int, height: int) -> UIContent:
        rows = self.session.visible_rows()
        self._row_indices = [row.index for row in rows]
        cursor_row = 0
        for i, row in enumerate(rows):
            if row.index == self.session.cursor:
                cursor_row = i
                break

        def get_line(i: int) -> list[tuple[str, str]]:
            if i >= len(rows):
                return []
            row = rows[i]
            if row.kind == FieldKind.HEADER:
                return [("class:section-header", f" {row.label}")]

            field = self.session.registry[row.index]
            focused = row.index == self.session.cursor
            base = "class:field.focused " if focused else ""
            indicator = "▸ " if focused else "  "

            if field.is_required:
                label_style = base + "class:field-label.required"
                label = f"{row.label} *"
            else:
                label_style = base + "class:field-label"
                label = row.label

            if field.is_dropdown:
                value_style, value = base + "class:dropdown.focused", f"▼ {row.value}"
            elif row.value:
                value_style, value = base + "class:field-value", row.value
            else:
                value_style, value = base + "class:field-value.empty", "(empty)"

            return [
                (base, indicator),
                (label_style, label.ljust(LABEL_WIDTH)),
                (base, " "),
                (value_style, value),
            ]

        return UIContent(
            get_line=get_line,
            line_count=len(rows),
            cursor_position=Point(x=0, y=cursor_row),
            show_cursor=False,
        )

    def mouse_handler(self, mouse_event: MouseEvent) -> None:
        if mouse_event.event_type == MouseEventType.MOUSE_UP:
            y = mouse_event.position.y
            if 0 <= y < len(self._row_indices):
                self.on_click(self._row_indices[y])

    def is_focusable(self) -> bool:
        return True


class OptionPicker(UIControl):
    """Expanded option list for the dropdown under the cursor.

    - Up/Down move the highlight
    - Enter/Space select the highlighted option and close the list
    - Escape closes the list without changing the selection
    """

    def __init__(
        self,
        field: Field,
        on_select: Callable[[int], None],
        on_cancel: Callable[[], None],
    ):
        self.field = field
        self.on_select = on_select
        self.on_cancel = on_cancel
        self._highlight_idx = field.selected_index
        self._hover_idx: Optional[int] = None

    def get_min_width(self) -> int:
        """Width needed to display the longest option plus indicator."""
        return max(len(opt.label) for opt in self.field.options) + 4

    def create_content(self, width: int, height: int) -> UIContent:
        options = self.field.options
        min_width = self.get_min_width()

        def get_line(i: int) -> list[tuple[str, str]]:
            if i >= len(options):
                return []

            is_selected = i == self.field.selected_index
            is_highlighted = i == self._highlight_idx

            if is_selected:
                indicator = "● "
            elif is_highlighted:
                indicator = "▸ "
            else:
                indicator = "  "
            text = indicator + options[i].label.ljust(min_width - 2)

            if is_highlighted or i == self._hover_idx:
                return [("class:dropdown.hover", text)]
            if is_selected:
                return [("class:dropdown.selected", text)]
            return [("class:dropdown.focused", text)]

        return UIContent(
            get_line=get_line,
            line_count=len(options),
            cursor_position=Point(x=0, y=self._highlight_idx),
            show_cursor=False,
        )

    def mouse_handler(self, mouse_event: MouseEvent) -> None:
        y = mouse_event.position.y
        in_range = 0 <= y < len(self.field.options)
        if mouse_event.event_type == MouseEventType.MOUSE_UP:
            if in_range:
                self.on_select(y)
            else:
                self.on_cancel()
        elif mouse_event.event_type == MouseEventType.MOUSE_MOVE:
            self._hover_idx = y if in_range else None

    def is_focusable(self) -> bool:
        return True

    def get_key_bindings(self) -> KeyBindings:
        """Key bindings for option navigation."""
        kb = KeyBindings()

        @kb.add("up")
        def move_up(event: Any) -> None:
            self._highlight_idx = (self._highlight_idx - 1) % len(self.field.options)

        @kb.add("down")
        def move_down(event: Any) -> None:
            self._highlight_idx = (self._highlight_idx + 1) % len(self.field.options)

        @kb.add("enter")
        @kb.add("space")
        def select_option(event: Any) -> None:
            self.on_select(self._highlight_idx)

        @kb.add("escape")
        def cancel(event: Any) -> None:
            self.on_cancel()

        return kb


class QuitPrompt(UIControl):
    """One-line "discard unsaved changes?" prompt shown above the help panel.

    Y quits, N or Escape returns to the form. Left/Right move between the two
    choices and Enter takes the highlighted one; the default is to stay.
    """

    CHOICES = ("Quit", "Keep editing")

    def __init__(self, on_quit: Callable[[], None], on_stay: Callable[[], None]):
        self.on_quit = on_quit
        self.on_stay = on_stay
        self.choice = 1

    def _spans(self) -> list[tuple[str, str]]:
        spans = [("class:quit-prompt", " Unsaved changes will be lost. ")]
        for i, label in enumerate(self.CHOICES):
            style = "class:button.focused" if i == self.choice else "class:button"
            spans.append((style, f" {label} "))
            spans.append(("class:quit-prompt", " "))
        return spans

    def create_content(self, width: int, height: int) -> UIContent:
        spans = self._spans()
        return UIContent(get_line=lambda i: spans if i == 0 else [], line_count=1)

    def _take(self, choice: int) -> None:
        if choice == 0:
            self.on_quit()
        else:
            self.on_stay()

    def mouse_handler(self, mouse_event: MouseEvent) -> None:
        if mouse_event.event_type != MouseEventType.MOUSE_UP:
            return
        x = mouse_event.position.x
        offset = 0
        for style, text in self._spans():
            if offset <= x < offset + len(text) and "button" in style:
                self._take(self.CHOICES.index(text.strip()))
                return
            offset += len(text)

    def is_focusable(self) -> bool:
        return True

    def get_key_bindings(self) -> KeyBindings:
        kb = KeyBindings()

        @kb.add("left")
        @kb.add("right")
        @kb.add("tab")
        def toggle(event: Any) -> None:
            self.choice = 1 - self.choice

        @kb.add("enter")
        def take(event: Any) -> None:
            self._take(self.choice)

        @kb.add("y")
        def quit_(event: Any) -> None:
            self.on_quit()

        @kb.add("n")
        @kb.add("escape")
        def stay(event: Any) -> None:
            self.on_stay()

        return kb


class ProvisioningApp:
    """Full-screen provisioning form editor.

    Shows every visible field on one screen with keyboard navigation.
    Up/Down to move between fields, Enter to edit, Left/Right to cycle a
    dropdown, Ctrl+S to save, Ctrl+Q to quit.
    """

    def __init__(self, session: Optional[ConfigSession] = None) -> None:
        self.session = session or ConfigSession.create()
        self.status_message = "New phone configuration"
        self.app: Optional[Application] = None
        self._form_control = FieldListControl(self.session, self._on_field_click)
        self._form_window = Window(
            content=self._form_control,
            scroll_offsets=ScrollOffsets(top=3, bottom=3),
        )
        # Free-text editing state
        self._edit_buffer = Buffer(name="edit", multiline=False)
        self._editing = False
        # Dropdown picker state
        self._picker: Optional[OptionPicker] = None
        # Unsaved-changes prompt state
        self._quit_prompt: Optional[QuitPrompt] = None

    def run(self) -> None:
        """Run the full-screen application."""
        self.app = Application(
            layout=self._create_layout(),
            key_bindings=self._create_bindings(),
            style=STYLE,
            full_screen=True,
            mouse_support=True,
        )
        self.app.run()

    # ------------------------------------------------------------------
    # Layout
    # ------------------------------------------------------------------

    def _create_layout(self) -> Layout:
        """Create the application layout."""
        title_bar = Window(
            content=FormattedTextControl(HTML("<b>SIP Phone Provisioning</b>")),
            style="class:title",
            height=1,
        )
        help_panel = Window(
            content=FormattedTextControl(self._get_help_text),
            style="class:help-panel",
            height=D(min=3, max=5),
            wrap_lines=True,
        )
        status_bar = Window(
            content=FormattedTextControl(self._get_status_bar),
            style="class:status-bar",
            height=1,
        )

        if self._picker is not None:
            right_panel = Frame(
                body=Window(content=self._picker, width=self._picker.get_min_width()),
                title=f"{self._picker.field.label}  (Esc to cancel)",
            )
        else:
            right_panel = Frame(
                body=TextArea(
                    text=self._preview_text(),
                    read_only=True,
                    scrollbar=True,
                    style="class:xml-preview",
                ),
                title=self._get_preview_title(),
            )

        main_content = VSplit([
            Frame(body=self._form_window, title="Settings", width=D(weight=60)),
            HSplit([right_panel], width=D(weight=40, min=40)),
        ])

        rows = [title_bar, main_content]
        if self._editing:
            rows.append(
                VSplit([
                    Window(
                        content=FormattedTextControl(
                            FormattedText([
                                ("class:field-label", f" {self.session.current_field.label}: ")
                            ])
                        ),
                        dont_extend_width=True,
                        height=1,
                    ),
                    Window(
                        content=BufferControl(buffer=self._edit_buffer),
                        style="class:field-input",
                        height=1,
                    ),
                ])
            )

        if self._quit_prompt is not None:
            rows.append(
                Window(
                    content=self._quit_prompt,
                    style="class:quit-prompt",
                    height=1,
                )
            )

        rows.extend([help_panel, status_bar])
        layout = Layout(HSplit(rows))
        layout.focus(self._focus_target())
        return layout

    def _focus_target(self) -> Any:
        if self._quit_prompt is not None:
            return self._quit_prompt
        if self._picker is not None:
            return self._picker
        if self._editing:
            return self._edit_buffer
        return self._form_control

    def _refresh_layout(self) -> None:
        """Rebuild the layout to update preview and visibility."""
        if self.app:
            self.app.layout = self._create_layout()

    def _preview_text(self) -> str:
        try:
            return self.session.preview()
        except ProvisioningError as e:
            return f"(no preview)\n\n{e}"

    def _get_preview_title(self) -> str:
        identity = self.session.registry.value(IDENTITY_TAG)
        if is_valid_identity(identity):
            return destination_name(identity)
        return "Preview"

    def _get_help_text(self) -> FormattedText:
        """Contextual help for the field under the cursor."""
        field = self.session.current_field
        parts = [("class:help", f"  {field.help_text}" if field.help_text else "")]
        if field.is_dropdown:
            options = ", ".join(opt.label for opt in field.options)
            parts.append(("class:help", f"\n  Options: {options}"))
        return FormattedText(parts)

    def _get_status_bar(self) -> FormattedText:
        """Status bar content with keyboard shortcut hints."""
        visible = sum(1 for row in self.session.visible_rows() if row.kind != FieldKind.HEADER)
        shortcuts = "↑↓:Nav  Enter:Edit  ←→:Cycle  Ctrl+S:Save  Ctrl+Q:Quit"
        unsaved = " *" if self.session.dirty else ""
        return FormattedText([
            ("class:status-bar", f"  {self.status_message}{unsaved}  │  {visible} fields  │  {shortcuts}  ")
        ])

    # ------------------------------------------------------------------
    # Key bindings
    # ------------------------------------------------------------------

    def _create_bindings(self) -> KeyBindings:
        """Create key bindings."""
        kb = KeyBindings()

        browsing = Condition(
            lambda: not self._editing
            and self._picker is None
            and self._quit_prompt is None
        )
        editing = Condition(lambda: self._editing)

        @kb.add("c-q")
        def quit_(event):
            """Quit with confirmation if unsaved changes."""
            self._quit_app()

        @kb.add("c-s", filter=browsing)
        def save_(event):
            """Save the provisioning file."""
            self._save_config()

        @kb.add("down", filter=browsing)
        @kb.add("tab", filter=browsing)
        def next_field_(event):
            """Move to next field."""
            self.session.move_next()
            self._refresh_layout()

        @kb.add("up", filter=browsing)
        @kb.add("s-tab", filter=browsing)
        def prev_field_(event):
            """Move to previous field."""
            self.session.move_prev()
            self._refresh_layout()

        @kb.add("left", filter=browsing)
        def cycle_back_(event):
            """Select the previous option of a dropdown."""
            self._cycle_option(-1)

        @kb.add("right", filter=browsing)
        def cycle_forward_(event):
            """Select the next option of a dropdown."""
            self._cycle_option(1)

        @kb.add("enter", filter=browsing)
        def edit_field_(event):
            """Open the option list or start editing text."""
            field = self.session.current_field
            if field.is_dropdown:
                self._open_picker(field)
            else:
                self._begin_edit(field)

        @kb.add("enter", filter=editing)
        def commit_edit_(event):
            """Store the edited text."""
            self._commit_edit()

        @kb.add("escape", filter=editing)
        def cancel_edit_(event):
            """Discard the edited text."""
            self._editing = False
            self.status_message = "Edit cancelled"
            self._refresh_layout()

        return kb

    # ------------------------------------------------------------------
    # Editing
    # ------------------------------------------------------------------

    def _on_field_click(self, index: int) -> None:
        if self._editing or self._picker is not None:
            return
        if is_selectable(self.session.registry[index]):
            self.session.cursor = index
            self._refresh_layout()

    def _cycle_option(self, step: int) -> None:
        field = self.session.current_field
        if not field.is_dropdown:
            return
        index = (field.selected_index + step) % len(field.options)
        self.session.set_selected(self.session.cursor, index)
        self._refresh_layout()

    def _begin_edit(self, field: Field) -> None:
        self._edit_buffer.text = field.value
        self._edit_buffer.cursor_position = len(field.value)
        self._editing = True
        self.status_message = "Enter to confirm, Esc to cancel"
        self._refresh_layout()

    def _commit_edit(self) -> None:
        field = self.session.set_value(self.session.cursor, self._edit_buffer.text)
        self._editing = False
        self.status_message = f"{field.label} updated"
        self._refresh_layout()

    def _open_picker(self, field: Field) -> None:
        self._picker = OptionPicker(field, self._on_option_selected, self._close_picker)
        self._refresh_layout()

    def _on_option_selected(self, index: int) -> None:
        field = self.session.set_selected(self.session.cursor, index)
        self._picker = None
        self.status_message = f"{field.label}: {field.value}"
        self._refresh_layout()

    def _close_picker(self) -> None:
        self._picker = None
        self._refresh_layout()

    # ------------------------------------------------------------------
    # Save / quit
    # ------------------------------------------------------------------

    def _save_config(self) -> None:
        """Write the provisioning file; failures stay on the status bar."""
        try:
            path = self.session.save()
        except ProvisioningError as e:
            self.status_message = f"Save failed: {e.headline}"
        else:
            missing = self.session.missing_required()
            if missing:
                self.status_message = f"Saved to: {path} (empty: {', '.join(missing)})"
            else:
                self.status_message = f"Saved to: {path}"
        self._refresh_layout()

    def _quit_app(self) -> None:
        """Quit, asking first if there are unsaved changes."""
        if not self.session.dirty:
            self._force_quit()
            return
        self._editing = False
        self._picker = None
        self._quit_prompt = QuitPrompt(self._force_quit, self._stay)
        self.status_message = "Y to discard changes and quit, N to keep editing"
        self._refresh_layout()

    def _force_quit(self) -> None:
        self._quit_prompt = None
        if self.app:
            self.app.exit()

    def _stay(self) -> None:
        self._quit_prompt = None
        self.status_message = "Cancelled"
        self._refresh_layout()


def run_form(settings: Optional[TUISettings] = None) -> ConfigSession:
    """Run the interactive form and return the session for inspection."""
    session = ConfigSession.create(settings)
    ProvisioningApp(session).run()
    return session
