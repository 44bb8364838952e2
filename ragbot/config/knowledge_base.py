"""
Ragbot - Built-in Knowledge Base
=================================
The documents the chatbot is allowed to answer from when no
``KNOWLEDGE_BASE_DIR`` is configured.  Replace with your own content.

Each entry is embedded as a single document, so keep one topic per
entry: the relevance gate compares the question against whole entries.
"""

KNOWLEDGE_BASE: tuple[str, ...] = (
    "Soy Lucía Navarro Ortega, desarrolladora backend especializada en ciberseguridad. "
    "Estudié el ciclo de Desarrollo de Aplicaciones Multiplataforma entre 2019 y 2021, "
    "donde trabajé con Java, Spring, Swift, Python, Android, JavaScript, HTML y CSS, "
    "además de metodologías ágiles como Scrum, computación en la nube e Internet de las Cosas.",

    "Entre 2022 y 2023 trabajé en una empresa de prevención de fraude. Empecé en el área de "
    "fraude con tarjetas y después pasé al equipo de I+D, donde mantuve servidores para la "
    "detección y notificación en tiempo real de vulnerabilidades críticas, desarrollé una "
    "aplicación Android de alerta de software malicioso y diseñé un sistema automático de "
    "búsqueda de vulnerabilidades. Utilicé Python, Android, Linux y SQL.",

    "Desde 2024 trabajo como desarrolladora backend en una empresa de software sanitario, "
    "continuando con Python, Android y Linux.",

    "Hablo español (nativo), inglés (avanzado) y tengo nociones básicas de chino.",

    "Mis intereses personales incluyen viajar (he visitado más de diez países), la lectura de "
    "ciencia ficción y fantasía, tocar la guitarra española y el cine de autor.",

    "Prefiero el trabajo presencial, pero no descarto el teletrabajo ni una modalidad híbrida. "
    "Me gustaría orientar mi carrera hacia la Inteligencia Artificial y el desarrollo de "
    "aplicaciones móviles para Android e iOS.",

    "Este chatbot responde únicamente a partir de esta base de conocimientos precargada, "
    "usando Gemini para los embeddings y la generación de respuestas.",
)
