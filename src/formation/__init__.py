"""Formation — form controls that remember their input, and schema validation.

Builds HTML form controls bound to one submission, validates the submitted
values against a declarative schema, and returns a sanitized copy.

Basic usage::

    from formation import Form

    form = Form(model="User")

    if form.process(request_data, request_files):
        schema = {
            "email": {"notEmpty": "Email is required", "isEmail": "Email is invalid"},
            "password": {
                "notEmpty": "Password is required",
                "checkLength": ("Password must be between 6-12 characters", 12, 6),
            },
        }
        if form.validates(schema):
            user = form.clean()

    form.create()
    form.text("email")
    form.password("password")
    form.close()

Validation without a form (``formation.validation``)::

    from formation import validate
    result = validate(schema, {"email": "foo@bar.com"})
"""

__version__ = "3.2.0"
__all__ = [
    "ConfigurationError",
    "FileUpload",
    "Form",
    "FormConfig",
    "FormData",
    "FormationError",
    "MissingValueError",
    "RULES",
    "RuleRegistry",
    "UnknownRuleError",
    "ValidationResult",
    "parse_form_data",
    "validate",
]

# Public name -> defining module
_LAZY_IMPORTS: dict[str, str] = {
    "ConfigurationError": "formation.errors",
    "FileUpload": "formation.http.forms",
    "Form": "formation.form",
    "FormConfig": "formation.config",
    "FormData": "formation.http.forms",
    "FormationError": "formation.errors",
    "MissingValueError": "formation.errors",
    "RULES": "formation.validation.registry",
    "RuleRegistry": "formation.validation.registry",
    "UnknownRuleError": "formation.errors",
    "ValidationResult": "formation.validation.result",
    "parse_form_data": "formation.http.forms",
    "validate": "formation.validation",
}


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import formation`` fast (kida and the rule catalog load on
    first use) while providing a clean top-level API.
    """
    module_name = _LAZY_IMPORTS.get(name)
    if module_name is None:
        msg = f"module {__name__!r} has no attribute {name!r}"
        raise AttributeError(msg)

    from importlib import import_module

    return getattr(import_module(module_name), name)
