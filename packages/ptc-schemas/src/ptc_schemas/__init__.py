"""ptc-schemas: Pydantic models shared by the ptc packages."""
