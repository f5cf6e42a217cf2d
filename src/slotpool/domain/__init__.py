"""Domain layer: slot pool aggregate, value objects and pricing"""
