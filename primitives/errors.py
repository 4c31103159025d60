"""Error types shared by the circuit layers."""


class ConfigurationError(ValueError):
    """Circuit shape or parameters are inconsistent.

    Raised eagerly while configuring or laying out a circuit. A bad witness
    never raises; it shows up as a VerifyFailure from the mock prover.
    """
