"""
StakeSim Package

Randomized staking operation generators for simulation testing.

Core imports are lazily loaded so that importing a submodule does not pull in
the logging system. For direct module access, import from submodules:

    from stakesim.simulation import simulate_msg_delegate
    from stakesim.config import SimulationConfig
    from stakesim.exceptions import StakeSimError
"""

__version__ = '0.1.0'


def __getattr__(name):
    """Lazy module loading."""
    if name == 'SimulationConfig':
        from .config import SimulationConfig
        return SimulationConfig
    elif name == 'StakeSimError':
        from .exceptions import StakeSimError
        return StakeSimError
    raise AttributeError(f"module 'stakesim' has no attribute {name!r}")

__all__ = ['SimulationConfig', 'StakeSimError']
