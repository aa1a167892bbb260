from courseware.models.course import Course, Topic
from courseware.models.material import Material, MaterialChunk

__all__ = [
    "Course",
    "Topic",
    "Material",
    "MaterialChunk",
]
