"""
Services layer - business logic goes here, not in routes.

- lifecycle: the only writer of problem state
- priority_scoring, duplicate_detection, resolution_predictor, assignment:
  read-only scorers over explicit snapshots
- engine: wires them together for the HTTP layer
"""
