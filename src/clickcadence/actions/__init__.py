from .click_sink import ActionError, ActionSink, NullActionSink, PynputClickSink, build_action_sink

__all__ = ["ActionError", "ActionSink", "NullActionSink", "PynputClickSink", "build_action_sink"]
