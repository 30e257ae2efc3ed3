"""
Undo History Manager for the Glitter editor

Keeps whole-document snapshots taken before each mutating operation.
Snapshots are full copies, not diffs; documents are small (rectangles only).
There is no redo stack: history only moves backwards.
"""

import copy
import logging

logger = logging.getLogger(__name__)


class HistoryManager:
	"""Manages undo history with state snapshots"""
	
	def __init__(self, max_history=50):
		"""
		Initialize the history manager
		
		Args:
			max_history: Maximum number of snapshots to keep
		"""
		self.max_history = max_history
		self.history = []  # Oldest first
		self._listeners = []  # Callbacks to notify on state changes
	
	def save_state(self, state_data, description=""):
		"""
		Push a snapshot of the state as it was before a mutation
		
		Args:
			state_data: Dictionary containing the full state to save
			description: Optional description of the change
		"""
		snapshot = {
			'data': copy.deepcopy(state_data),
			'description': description
		}
		self.history.append(snapshot)
		
		# Drop the oldest snapshot once over capacity
		if len(self.history) > self.max_history:
			self.history.pop(0)
		
		self._notify_listeners()
		logger.debug(f"State saved: {description} (total: {len(self.history)})")
	
	def discard_last(self):
		"""Drop the most recent snapshot without restoring it (rejected operation)"""
		if self.history:
			entry = self.history.pop()
			self._notify_listeners()
			logger.debug(f"Discarded snapshot: {entry['description']}")
	
	def undo(self):
		"""
		Pop the most recent snapshot
		
		Returns:
			Deep copy of the snapshot data, or None if history is empty
		"""
		if not self.can_undo():
			logger.debug("Cannot undo - history is empty")
			return None
		
		entry = self.history.pop()
		self._notify_listeners()
		
		logger.debug(f"Undo: {entry['description']} (remaining: {len(self.history)})")
		return copy.deepcopy(entry['data'])
	
	def can_undo(self):
		"""Check if undo is available"""
		return len(self.history) > 0
	
	def clear(self):
		"""Clear all history"""
		self.history = []
		self._notify_listeners()
		logger.debug("History cleared")
	
	def add_listener(self, callback):
		"""
		Add a listener to be notified when history changes
		
		Args:
			callback: Function called with can_undo (bool)
		"""
		self._listeners.append(callback)
	
	def remove_listener(self, callback):
		"""Remove a listener"""
		if callback in self._listeners:
			self._listeners.remove(callback)
	
	def _notify_listeners(self):
		"""Notify all listeners of history state change"""
		for callback in self._listeners:
			try:
				callback(self.can_undo())
			except Exception as e:
				logger.error(f"Error notifying history listener: {e}")
	
	def get_undo_description(self):
		"""Get the description of the operation undo would revert"""
		if self.can_undo():
			return self.history[-1]['description']
		return ""
