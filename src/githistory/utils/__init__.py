"""Utility module for githistory."""

from .events import Disposable, EventEmitter, IDisposable

__all__ = ["Disposable", "EventEmitter", "IDisposable"]
