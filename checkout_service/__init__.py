"""Client-side checkout orchestration: session sync and order submission"""

__version__ = "1.0.0"
