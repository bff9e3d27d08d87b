"""Application layer: collaborator ports and the dispatch planner."""
