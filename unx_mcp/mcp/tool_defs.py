"""MCP tool definitions returned by tools/list.

Each definition carries the JSON Schema of its arguments. The argument models
in `unx_mcp.models.requests` must accept exactly these properties.

Tools:
    - get_active_courses: catalog overview with promotional prices
    - get_course_details: full detail of one course for the current calendar
    - recommend_course: course recommended for a target career
"""

from ..models import ToolName

GET_ACTIVE_COURSES = {
    "name": ToolName.GET_ACTIVE_COURSES.value,
    "description": "Obtiene la lista de cursos activos con su modalidad, precio promocional y fecha de inicio.",
    "inputSchema": {"type": "object", "properties": {}},
}

GET_COURSE_DETAILS = {
    "name": ToolName.GET_COURSE_DETAILS.value,
    "description": (
        "Obtiene el detalle completo de un curso: fechas, horario, precio de lista, "
        "precio promocional y su vigencia, apartado, link de compra e imagen."
    ),
    "inputSchema": {
        "type": "object",
        "properties": {
            "keyword": {
                "type": "string",
                "minLength": 1,
                "description": "Parte del nombre. Ej: Integral, Exponencial",
            },
            "modality": {"type": "string", "description": "Modalidad. Ej: Presencial, Zoom"},
        },
        "required": ["keyword"],
    },
}

RECOMMEND_COURSE = {
    "name": ToolName.RECOMMEND_COURSE.value,
    "description": "Recomienda el curso más adecuado para un aspirante según la carrera que quiere estudiar.",
    "inputSchema": {
        "type": "object",
        "properties": {
            "career": {
                "type": "string",
                "minLength": 1,
                "description": "Carrera deseada. Ej: Medicina, Ingeniería Civil",
            },
        },
        "required": ["career"],
    },
}

TOOL_DEFINITIONS: list[dict] = [
    GET_ACTIVE_COURSES,
    GET_COURSE_DETAILS,
    RECOMMEND_COURSE,
]
