"""
JAX Configuration - MUST be imported before any other stretchfit module.

This module sets environment variables and runtime flags for JAX:
- 64-bit floating point (data near 1e13 needs the full float64 mantissa)
- Persistent compilation cache directory
- Quiet XLA C++ logging
"""
import os
from pathlib import Path

# --- PRECISION ---
os.environ.setdefault("JAX_ENABLE_X64", "1")

# --- XLA LOGGING ---
os.environ.setdefault("TF_CPP_MIN_LOG_LEVEL", "2")

# --- PERSISTENT COMPILATION CACHE ---
# Stretch-move kernels are small, so only cache ones that took a while to build
_JAX_CACHE_DIR = Path.home() / ".cache" / "jax" / "stretchfit_cache"
_JAX_CACHE_DIR.mkdir(parents=True, exist_ok=True)
os.environ.setdefault("JAX_COMPILATION_CACHE_DIR", str(_JAX_CACHE_DIR))
os.environ.setdefault("JAX_PERSISTENT_CACHE_MIN_COMPILE_TIME_SECS", "1.0")

import jax  # noqa: E402

# The env var is only read when jax is first imported; enforce it in case
# jax was imported before this module.
if os.environ["JAX_ENABLE_X64"].lower() in ("1", "true", "yes"):
    jax.config.update("jax_enable_x64", True)
