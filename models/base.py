from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

OBJECT_ID_PATTERN = r"^[0-9a-fA-F]{24}$"

class CamelModel(BaseModel):
    """Payload model whose wire and storage names are camelCase."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
        use_enum_values=True,
        extra="ignore",
    )

    def to_document(self, exclude_unset: bool = False) -> dict:
        """
        Storage form of the payload. With ``exclude_unset`` only top-level
        fields the client sent are kept; nested values keep their defaults.
        """
        doc = self.model_dump(by_alias=True)
        if not exclude_unset:
            return doc
        fields = type(self).model_fields
        sent = {fields[name].alias or name for name in self.model_fields_set}
        return {key: value for key, value in doc.items() if key in sent}
