"""Command-line interface for slack-llm-bot."""
