"""Theme definitions for the TUI.

This module hides the design decisions about:
- Color palettes and visual appearance
- Theme variables (borders, scrollbars, etc.)

To add a new theme, define it here and register in the app.
"""

from textual.theme import Theme

# Dark palette based on Catppuccin Mocha
TODO_NIGHT = Theme(
    name="todo-night",
    primary="#89b4fa",      # Blue - user input and focus
    secondary="#cba6f7",    # Mauve - assistant messages
    accent="#f9e2af",       # Yellow - suggestions
    foreground="#cdd6f4",
    background="#11111b",
    success="#a6e3a1",
    warning="#fab387",
    error="#f38ba8",
    surface="#1e1e2e",
    panel="#181825",
    dark=True,
    variables={
        "block-cursor-foreground": "#11111b",
        "block-cursor-background": "#f5e0dc",
        "input-cursor-background": "#cdd6f4",
        "input-cursor-foreground": "#11111b",
        "input-selection-background": "#89b4fa 30%",
        "border": "#45475a",
        "border-blurred": "#313244",
        "scrollbar": "#45475a",
        "scrollbar-hover": "#585b70",
        "scrollbar-background": "#181825",
        "footer-key-foreground": "#89b4fa",
        "footer-description-foreground": "#a6adc8",
    },
)
