"""Tock — a live command timeline for instrumented apps.

Receives the stream of instrumentation commands a monitored app emits
(state changes, API calls, logs) and lets you search, filter, reorder and
export them as they arrive.

Quick start::

    import tock

    session = tock.TimelineSession()
    session.append(tock.Command(type="log", payload={"message": "hello"}))
    session.state.set_search("hello")
    session.render()

Entry points::

    tock.show("timeline.json", search="users")   # Print the filtered timeline
    tock.export_log("timeline.json", api=True)   # API-call report
    tock.follow("timeline.ndjson")               # Tail a live log

"""

__version__ = "0.1.0"
__all__ = [
    "Command",
    "TimelineSession",
    "TockConfig",
    "__version__",
    "export_log",
    "follow",
    "show",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import tock`` fast while providing a clean top-level API.
    """
    if name == "TockConfig":
        from tock.config import TockConfig

        return TockConfig

    if name == "Command":
        from tock.timeline.command import Command

        return Command

    if name in ("TimelineSession", "export_log", "follow", "show"):
        import importlib

        return getattr(importlib.import_module("tock.app"), name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
