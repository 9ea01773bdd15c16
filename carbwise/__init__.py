"""Carbohydrate lookup service backed by the Perplexity chat-completion API."""
