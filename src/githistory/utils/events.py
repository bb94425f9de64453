"""
Event primitives used to wire the repository layer to history consumers.

Listeners are plain callables. Firing an event calls every listener
synchronously, in subscription order. A listener must not trigger another
fire of the same emitter; reentrant notification is not supported.

"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Generic, Protocol, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class IDisposable(Protocol):
	"""Anything holding a resource that must be released explicitly."""

	def dispose(self) -> None:
		"""Release the resource."""
		...


class Disposable:
	"""Runs a release callback when disposed."""

	def __init__(self, on_dispose: Callable[[], None]) -> None:
		"""
		Initialize the disposable.

		Args:
			on_dispose: Callback invoked by ``dispose``
		"""
		self._on_dispose = on_dispose

	@classmethod
	def from_(cls, *disposables: IDisposable) -> Disposable:
		"""Combine several disposables into one, released in the given order."""

		def _dispose_all() -> None:
			for disposable in disposables:
				disposable.dispose()

		return cls(_dispose_all)

	def dispose(self) -> None:
		"""Run the release callback."""
		self._on_dispose()


class EventEmitter(Generic[T]):
	"""
	A single event source with any number of listeners.

	``event`` is the subscription function handed out to consumers; calling it
	with a listener returns a ``Disposable`` that removes the listener again.

	"""

	def __init__(self) -> None:
		"""Initialize an emitter with no listeners."""
		self._listeners: list[Callable[[T], None]] = []
		self._disposed = False

	def event(self, listener: Callable[[T], None]) -> Disposable:
		"""
		Subscribe a listener.

		Args:
			listener: Callable receiving the fired value

		Returns:
			Disposable that unsubscribes the listener
		"""
		if self._disposed:
			msg = "Cannot subscribe to a disposed event emitter"
			raise RuntimeError(msg)

		self._listeners.append(listener)

		def _remove() -> None:
			if listener in self._listeners:
				self._listeners.remove(listener)

		return Disposable(_remove)

	def fire(self, value: T = None) -> None:  # type: ignore[assignment]
		"""
		Notify every listener with ``value``.

		A failing listener is logged and does not prevent the remaining
		listeners from running.

		Args:
			value: Payload passed to each listener
		"""
		for listener in list(self._listeners):
			try:
				listener(value)
			except Exception:
				logger.exception("Event listener %r raised", listener)

	@property
	def listener_count(self) -> int:
		"""Number of currently subscribed listeners."""
		return len(self._listeners)

	def dispose(self) -> None:
		"""Drop all listeners and refuse new subscriptions."""
		self._listeners.clear()
		self._disposed = True
