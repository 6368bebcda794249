"""Runtime configuration for hyperray geometry."""

from typing import Union

import jax
import jax.numpy as jnp
from flax import struct


@struct.dataclass
class RuntimeConfig:
    """Immutable runtime configuration for hyperboloid point and wall operations.

    Holds the dtype new points are built with and the tolerances used by the
    distance kernels, the manifold checks and the scene decoder. Instances are
    frozen; use ``replace`` or the ``with_*`` builders to derive new ones.
    """

    # Core dtype and precision
    dtype: jnp.dtype = struct.field(pytree_node=False, default=jnp.float32)

    # Tolerances for manifold membership checks
    rtol: float = 1e-5
    atol: float = 1e-4

    # acosh arguments in [1 - acosh_eps * scale, 1) are treated as rounding and snapped to 1
    acosh_eps: float = 1e-6

    # Poincaré points need |p|^2 <= 1 - disk_eps to count as inside the disk
    disk_eps: float = 1e-7

    # Reject off-manifold points while decoding scenes instead of warning
    strict_decode: bool = struct.field(pytree_node=False, default=False)

    def __post_init__(self):
        """Validate configuration after initialization."""
        if self.dtype not in (jnp.float32, jnp.float64):
            raise ValueError(f"Unsupported dtype: {self.dtype}. Use float32 or float64.")
        if self.atol < 0 or self.rtol < 0:
            raise ValueError(f"Tolerances must be non-negative, got atol={self.atol}, rtol={self.rtol}")
        if not 0 <= self.acosh_eps < 1:
            raise ValueError(f"acosh_eps must lie in [0, 1), got {self.acosh_eps}")
        if not 0 <= self.disk_eps < 1:
            raise ValueError(f"disk_eps must lie in [0, 1), got {self.disk_eps}")

    @property
    def eps(self) -> float:
        """Machine epsilon for the current dtype."""
        return float(jnp.finfo(self.dtype).eps)

    def with_dtype(self, dtype: Union[str, jnp.dtype]) -> "RuntimeConfig":
        """Create a new config with different dtype, adjusting the acosh snap band."""
        if isinstance(dtype, str):
            dtype = getattr(jnp, dtype)

        new_acosh_eps = 1e-9 if dtype == jnp.float64 else 1e-6

        return self.replace(
            dtype=dtype,
            acosh_eps=new_acosh_eps,
        )

    def with_tolerances(self, rtol: float = None, atol: float = None) -> "RuntimeConfig":
        """Create a new config with different tolerances."""
        updates = {}
        if rtol is not None:
            updates["rtol"] = rtol
        if atol is not None:
            updates["atol"] = atol
        return self.replace(**updates)

    def with_precision(self, precision: str) -> "RuntimeConfig":
        """Create a new config with 'high' or 'low' precision preset."""
        if precision == "high":
            return self.with_dtype(jnp.float64).with_tolerances(rtol=1e-10, atol=1e-10)
        elif precision == "low":
            return self.with_dtype(jnp.float32).with_tolerances(rtol=1e-4, atol=1e-3)
        else:
            raise ValueError(f"Unknown precision preset: {precision}")


# Common pre-configured instances
DEFAULT_CONFIG = RuntimeConfig()
FLOAT64_CONFIG = RuntimeConfig().with_dtype(jnp.float64)
HIGH_PRECISION_CONFIG = RuntimeConfig().with_precision("high")
LOW_PRECISION_CONFIG = RuntimeConfig().with_precision("low")
STRICT_CONFIG = RuntimeConfig(strict_decode=True)


def get_dtype_config(dtype: Union[str, jnp.dtype]) -> RuntimeConfig:
    """Get a default config for the specified dtype."""
    if isinstance(dtype, str):
        dtype = getattr(jnp, dtype)

    if dtype == jnp.float64:
        return FLOAT64_CONFIG
    else:
        return DEFAULT_CONFIG


def create_config(
    dtype: Union[str, jnp.dtype] = jnp.float32,
    precision: str = None,
    **kwargs,
) -> RuntimeConfig:
    """Create a runtime config with optional overrides.

    Args:
        dtype: Data type (float32 or float64)
        precision: Preset precision level ('high', 'low', or None)
        **kwargs: Additional config parameters to override

    Returns:
        RuntimeConfig instance
    """
    config = get_dtype_config(dtype)

    if precision is not None:
        config = config.with_precision(precision)

    if kwargs:
        config = config.replace(**kwargs)

    return config


def x64_enabled() -> bool:
    """Whether JAX was switched to 64-bit mode (``jax_enable_x64``)."""
    return bool(jax.config.jax_enable_x64)


def resolve_dtype(dtype: Union[str, jnp.dtype, None] = None) -> jnp.dtype:
    """Dtype new points are built with.

    ``None`` picks float64 when 64-bit mode is on and ``DEFAULT_CONFIG.dtype``
    otherwise. Without 64-bit mode, float32 rounds z to exactly 1 for points
    closer to the origin than about 5e-4, so their distances collapse to 0.

    Raises:
        ValueError: If float64 is requested while 64-bit mode is off
    """
    if dtype is None:
        return jnp.float64 if x64_enabled() else DEFAULT_CONFIG.dtype
    if isinstance(dtype, str):
        dtype = getattr(jnp, dtype)
    if jnp.dtype(dtype) == jnp.float64 and not x64_enabled():
        raise ValueError(
            "float64 points need 64-bit JAX; call jax.config.update('jax_enable_x64', True) at startup"
        )
    return dtype
