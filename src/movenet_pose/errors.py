"""
Eccezioni della pipeline di stima della posa.

Ogni operazione solleva l'eccezione corrispondente alla condizione rilevata;
nessun errore viene ignorato o ritentato automaticamente.
"""


class PoseEstimationError(RuntimeError):
    """Base class for all pose pipeline errors."""


class NotInitializedError(PoseEstimationError):
    """Operazione richiesta prima di initialize() o dopo finalize()."""


class AlreadyInitializedError(PoseEstimationError):
    """initialize() chiamato su una sessione già attiva."""


class ModelLoadError(PoseEstimationError):
    """Modello mancante, illeggibile o incompatibile con i descrittori dei tensori."""


class InvalidInputError(PoseEstimationError):
    """Frame vuoto o malformato."""


class InferenceError(PoseEstimationError):
    """Errore del runtime durante l'esecuzione del modello (shape errata, errore del backend)."""


class UnsupportedCommandError(PoseEstimationError):
    """Codice comando non supportato."""

    def __init__(self, cmd: int):
        super().__init__(f"command({cmd}) is not supported")
        self.cmd = cmd
