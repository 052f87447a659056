"""Domain layer - provisioning model, error taxonomy and ports."""
