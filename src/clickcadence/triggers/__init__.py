from .hotkey import HotkeyBinding, HotkeyListener, tokenize_key

__all__ = ["HotkeyBinding", "HotkeyListener", "tokenize_key"]
