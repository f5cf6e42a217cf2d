"""Infrastructure layer: factories, payment rails and messaging"""
