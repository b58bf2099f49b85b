"""Dynamic Django forms generated from editor entity schemas."""

from __future__ import annotations

from typing import Any

from django import forms
from django.core.validators import RegexValidator

from editor.schemas import EntitySchema, FieldType, SchemaField
from editor.validation import validate_entity


def _form_field(schema_field: SchemaField) -> forms.Field:
    """Build the form field for one schema field.

    Form fields are optional at the widget level; requiredness is enforced in
    `EntityForm.clean` so `show_when` conditions can switch it off.
    """

    common: dict[str, Any] = {
        "required": False,
        "label": schema_field.label,
        "help_text": schema_field.description,
    }
    attrs = {"placeholder": schema_field.placeholder} if schema_field.placeholder else {}
    rules = schema_field.validation

    match schema_field.type:
        case FieldType.string | FieldType.url | FieldType.date:
            validators = [RegexValidator(rules.pattern)] if rules and rules.pattern else []
            return forms.CharField(
                widget=forms.TextInput(attrs=attrs),
                validators=validators,
                strip=True,
                **common,
            )
        case FieldType.text:
            return forms.CharField(widget=forms.Textarea(attrs={"rows": 4, **attrs}), strip=True, **common)
        case FieldType.number:
            return forms.FloatField(
                min_value=rules.min if rules else None,
                max_value=rules.max if rules else None,
                widget=forms.NumberInput(attrs=attrs),
                **common,
            )
        case FieldType.boolean:
            return forms.BooleanField(**common)
        case FieldType.select:
            choices = [("", "---------"), *((option.value, option.label) for option in schema_field.options)]
            return forms.ChoiceField(choices=choices, **common)
        case FieldType.multiselect:
            choices = [(option.value, option.label) for option in schema_field.options]
            return forms.MultipleChoiceField(choices=choices, **common)
        case FieldType.array:
            return forms.JSONField(widget=forms.Textarea(attrs={"rows": 6, "class": "json", **attrs}), **common)
    raise ValueError(f"Unsupported field type: {schema_field.type}")


def _record_value(schema_field: SchemaField, value: Any) -> Any:
    if schema_field.type == FieldType.number and isinstance(value, float) and value.is_integer():
        return int(value)
    return value


class EntityForm(forms.Form):
    """Edit one entity record described by an `EntitySchema`.

    Args:
        schema: Schema that declares the form fields.
        existing_id: Id of the record being edited; the id field becomes
            read-only when set.
    """

    def __init__(self, *args: Any, schema: EntitySchema, existing_id: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.schema = schema
        self.existing_id = existing_id
        for schema_field in schema.fields:
            self.fields[schema_field.name] = _form_field(schema_field)
            if schema_field.default is not None and schema_field.name not in self.initial:
                self.fields[schema_field.name].initial = schema_field.default
        if existing_id is not None and "id" in self.fields:
            self.fields["id"].disabled = True
            self.initial.setdefault("id", existing_id)

    def to_record(self) -> dict[str, Any]:
        """Return the cleaned data as a JSON record, omitting empty values."""

        data = getattr(self, "cleaned_data", {})
        record: dict[str, Any] = {}
        for schema_field in self.schema.fields:
            value = data.get(schema_field.name)
            if value is None or value == "" or value == []:
                if schema_field.type != FieldType.boolean:
                    continue
                value = False
            record[schema_field.name] = _record_value(schema_field, value)
        if self.existing_id is not None:
            record["id"] = self.existing_id
        return {
            name: value
            for name, value in record.items()
            if (schema_field := self.schema.field_by_name(name)) is None or schema_field.applies_to(record)
        }

    def clean(self) -> dict[str, Any]:
        cleaned = super().clean()
        if self.errors:
            return cleaned
        for error in validate_entity(self.schema, self.to_record()):
            target = error.field if error.field in self.fields else None
            self.add_error(target, error.message)
        return cleaned
