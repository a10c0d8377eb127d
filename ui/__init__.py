"""ui — Modal UI framework.

A ``ModalStack`` layers the overlays that take over the keyboard (the
dialogue box, the text box).  Modals report the player's intent as
commands; the scene routes them into the simulation.
"""

from ui.modal import Modal, ModalStack
from ui.commands import (
    CancelDialogue, DismissText, NavigateDialogue, SelectResponse, UICommand,
)
from ui.dialogue_modal import DialogueModal
from ui.text_modal import TextModal

__all__ = [
    "Modal", "ModalStack",
    "CancelDialogue", "DismissText", "NavigateDialogue", "SelectResponse",
    "UICommand",
    "DialogueModal", "TextModal",
]
