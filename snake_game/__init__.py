"""Single-player grid snake: simulation core, session state machine and a pygame client."""
