"""Groundwork retrieval — embeddings, temporal re-ranking, context formatting."""
