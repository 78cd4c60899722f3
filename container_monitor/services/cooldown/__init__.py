from .cooldown_gate import CooldownGate
from .cooldown_store import CooldownStore, FileCooldownStore, InMemoryCooldownStore

__all__ = ["CooldownGate", "CooldownStore", "FileCooldownStore", "InMemoryCooldownStore"]
