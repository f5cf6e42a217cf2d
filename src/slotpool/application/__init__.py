"""Application layer: parking use cases, DTOs and simulation"""
