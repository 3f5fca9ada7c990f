from .backends import Backend, TerminalBackend, VirtualBackend
from .commands import Branch, Command, CommandList, Leaf, Resolution, resolve
from .editor import EditorState, LineEditor
from .errors import ConfigurationError, MenuFileError, NotRunningError, ShellError, TerminalError
from .events import ErrorEvent, KeyEvent, ResizeEvent
from .forms import Field, FieldCategory, FieldCategoryList, FieldList
from .history import History, HistoryEntry
from .screen import Position, Screen, byte_offset
from .shell import Shell, ShellContext
from .tokenizer import tokenize

__all__ = [
    "Backend",
    "Branch",
    "Command",
    "CommandList",
    "ConfigurationError",
    "EditorState",
    "ErrorEvent",
    "Field",
    "FieldCategory",
    "FieldCategoryList",
    "FieldList",
    "History",
    "HistoryEntry",
    "KeyEvent",
    "Leaf",
    "LineEditor",
    "MenuFileError",
    "NotRunningError",
    "Position",
    "Resolution",
    "ResizeEvent",
    "Screen",
    "Shell",
    "ShellContext",
    "ShellError",
    "TerminalBackend",
    "TerminalError",
    "VirtualBackend",
    "byte_offset",
    "resolve",
    "tokenize",
]
