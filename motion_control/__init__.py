"""Motion Control Package.

Joint configuration for a multi-joint motion controller.  Reads the
``[JOINT_<n>]`` sections of a machine file, applies the resolved values
to a controller in a fixed order, and activates each joint last.

Subpackages:
    configs: Config sources, value conversion, loader defaults, errors
    joints: Joint parameter model and loader
    hardware: Controller interface, in-memory controller, compensation tables
    formatting: Precision-preserving float formats
    utils: Logging configuration and file helpers
"""

__version__ = "0.3.0"

__all__ = ["configs", "joints", "hardware", "formatting", "utils"]
