"""Prompt templates for roadmap generation."""

from app.schemas.roadmap import RoadmapGenerateRequest, TopicCategory

FRONTEND_FRAMEWORKS = ("React", "Vue", "Angular", "Svelte", "Next.js", "Nuxt.js")
BACKEND_FRAMEWORKS = (
    "Express.js",
    "Django",
    "Flask",
    "Spring Boot",
    "FastAPI",
    "Rails",
    "NestJS",
    "Laravel",
)

NONE_PLACEHOLDER = "None"

GENERATE_ROADMAP_PROMPT = """You are an expert software engineering learning assistant.
Generate a structured learning roadmap for a user with the following inputs:
- Roadmap Name: {roadmap_name}
- Skill Level: {skill_level}
- Include Projects: {include_projects}
- Tech Stack:
  - Languages: {languages}
  - Frameworks: {frameworks}
  - Frontend Frameworks: {frontend_frameworks}
  - Backend Frameworks: {backend_frameworks}
  - Libraries: {libraries}
  - Databases: {databases}
  - DevOps & Cloud: {devops}
  - Other Tech: {other_tech}

Return a JSON response in this exact format:
{{
  "title": "string",
  "description": "string",
  "totalDuration": "string (e.g., '12 weeks')",
  "stages": [
    {{
      "stageTitle": "string",
      "duration": "string (e.g., '2 weeks')",
      "topics": [
        {{
          "topicTitle": "string",
          "resources": ["resource1", "resource2"],
          "category": "{categories}",
          "project": "string (only if includeProjects=true)"
        }}
      ]
    }}
  ]
}}

Make sure to provide practical, real-world resources like documentation links, tutorials, and courses. Keep the roadmap comprehensive but achievable for the specified skill level."""


def _join(items: list[str] | None) -> str:
    return ", ".join(items) if items else NONE_PLACEHOLDER


def build_generation_prompt(request: RoadmapGenerateRequest) -> str:
    """Render the generation instruction for ``request``.

    Every input appears verbatim; empty lists render as ``None``.
    """
    stack = request.tech_stack
    return GENERATE_ROADMAP_PROMPT.format(
        roadmap_name=request.roadmap_name,
        skill_level=request.skill_level.value,
        include_projects=str(request.include_projects).lower(),
        languages=_join(stack.languages),
        frameworks=_join(stack.frameworks),
        frontend_frameworks=_join([f for f in stack.frameworks if f in FRONTEND_FRAMEWORKS]),
        backend_frameworks=_join([f for f in stack.frameworks if f in BACKEND_FRAMEWORKS]),
        libraries=_join(stack.libraries),
        databases=_join(stack.databases),
        devops=_join(stack.devops),
        other_tech=_join(stack.other_tech),
        categories="|".join(c.value for c in TopicCategory),
    )
