"""Infrastructure adapters: logging, collaborator contracts and reference stores."""
