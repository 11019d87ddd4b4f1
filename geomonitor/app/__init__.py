"""Web API and monitoring pipeline."""
