# ur_game/client/__init__.py

from .channel import Channel, SocketIOChannel
from .liveness import LivenessMonitor
from .local_store import LocalStore
from .sync_session import SessionView, SyncSession
