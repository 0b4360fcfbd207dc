"""
App-wide constants for the companion home screen.

Display labels and user-facing messages live here so the coordinator and the
providers agree on them.
"""

class RoleLabels:
    """Display labels for the role the viewer held in a match."""
    
    MURDERER = "Asesino"
    INNOCENT = "Inocente"
    
    @classmethod
    def for_classification(cls, was_murderer: bool) -> str:
        return cls.MURDERER if was_murderer else cls.INNOCENT

class ErrorMessages:
    """User-facing error messages, one per home screen section."""
    
    PROFILE = "Error al cargar los datos del usuario: {description}"
    FRIENDS = "Error al cargar los amigos: {description}"
    MATCHES = "Error al cargar las partidas: {description}"
    SESSION = "Error al cerrar sesión: {description}"

class DisplayFormats:
    """Formats used when turning stored match data into display strings."""
    
    MATCH_DATE = "%d/%m/%Y"
    DURATION = "{minutes:02d}:{seconds:02d}"
