from .projector import ProjectionState, apply_event, parse_event, project, replay

__all__ = ["ProjectionState", "apply_event", "parse_event", "project", "replay"]
