"""Evaluator, scorer, signal extractor, page capture, history and orchestration."""
