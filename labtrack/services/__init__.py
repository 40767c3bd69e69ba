"""
Lab Services
============

Create operations for the records LabBot manages. Each service validates its
input with a pydantic model and performs exactly one store write.
"""

from labtrack.services.projects import ProjectCreationInput, create_project
from labtrack.services.samples import SampleCreationInput, create_sample

__all__ = [
    "ProjectCreationInput",
    "SampleCreationInput",
    "create_project",
    "create_sample",
]
