"""
Boilerplate PropertyDescriptor untuk processor Google Analytics.
Build descriptor dari PROPERTY_DEFS dan baca nilainya dari context.
"""

from nifiapi.properties import ExpressionLanguageScope, PropertyDescriptor, StandardValidators

VALIDATORS = {
    "NON_EMPTY": StandardValidators.NON_EMPTY_VALIDATOR,
    "NON_NEGATIVE_INTEGER": StandardValidators.NON_NEGATIVE_INTEGER_VALIDATOR,
}


def get_property_descriptors(property_defs, el_scope):
    """Build property descriptors dari PROPERTY_DEFS. Property sensitive tidak support EL."""
    pds = []
    for p in property_defs:
        v = VALIDATORS.get(p.get("validator"))
        pds.append(PropertyDescriptor(
            name=p["name"],
            display_name=p["display"],
            description=p["description"],
            default_value=p.get("default"),
            required=p.get("required", False),
            sensitive=p.get("sensitive", False),
            validators=[v] if v else [],
            expression_language_scope=ExpressionLanguageScope.NONE if p.get("sensitive") else el_scope,
        ))
    return pds


def read_properties(context, property_defs, flowfile=None):
    """Baca property value dari context; yang support EL dievaluasi terhadap flowfile."""
    values = {}
    for p in property_defs:
        pv = context.getProperty(p["name"])
        if not p.get("sensitive"):
            pv = pv.evaluateAttributeExpressions(flowfile)
        values[p["name"]] = pv.getValue()
    return values
