"""Service layer: build context, actions, pipeline, and project model."""
