from typing import Any, Iterable, List


class PipelineError(ValueError):
    """Erreur de base du pipeline (données inattendues, jointure, modèle)."""


def _preview(values: Iterable[Any], limit: int = 10) -> List[Any]:
    values = list(values)
    return values[:limit] + (["..."] if len(values) > limit else [])


class MissingColumnError(PipelineError):
    def __init__(self, table: str, columns: Iterable[str]):
        self.table = table
        self.columns = list(columns)
        super().__init__(
            f"Colonnes absentes de la table {table} : {self.columns}"
        )


class UnmappedCategoryError(PipelineError):
    """Une valeur catégorielle n'a pas de correspondance dans la table de recodage."""

    def __init__(self, column: str, values: Iterable[Any], ids: Iterable[Any]):
        self.column = column
        self.values = sorted({str(v) for v in values})
        self.ids = list(ids)
        super().__init__(
            f"Valeur(s) non reconnue(s) dans {column} : {self.values} "
            f"(patients {_preview(self.ids)})"
        )


class InvalidValueError(PipelineError):
    """Une valeur présente ne peut pas être convertie en nombre."""

    def __init__(self, column: str, values: Iterable[Any], ids: Iterable[Any]):
        self.column = column
        self.values = sorted({str(v) for v in values})
        self.ids = list(ids)
        super().__init__(
            f"Valeur(s) non numérique(s) dans {column} : {self.values} "
            f"(patients {_preview(self.ids)})"
        )


class DuplicatePatientError(PipelineError):
    def __init__(self, ids: Iterable[Any]):
        self.ids = sorted({str(i) for i in ids})
        super().__init__(f"Identifiants patients dupliqués : {self.ids}")


class JoinDefectError(PipelineError):
    """La jointure clinique / génomique a perdu ou laissé des patients incomplets."""


class ModelFitError(PipelineError):
    def __init__(self, message: str, ids: Iterable[Any] = (), columns=()):
        self.ids = list(ids)
        self.columns = list(columns)
        if self.ids or self.columns:
            message = (
                f"{message} (patients {_preview(self.ids)}, "
                f"colonnes {self.columns})"
            )
        super().__init__(message)


class EvaluationError(PipelineError):
    """Le C-index ne peut pas être calculé (tailles, NaN, aucune paire comparable)."""
