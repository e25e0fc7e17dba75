"""
CloudFormation template assembly on top of troposphere.

Resources are keyed by their troposphere title (the logical name). Explicit
creation-order edges are carried by each resource's ``DependsOn`` attribute;
implicit edges come from ``Ref`` and ``Fn::GetAtt`` inside the properties.
"""
from typing import Any, Dict, Iterable, List, Optional, Set

from troposphere import AWSObject, Template, encode_to_dict

from omega_deploy.domain.core.exceptions import GraphMutationError

FORMAT_VERSION = "2010-09-09"


def new_template(description: Optional[str] = None) -> Template:
    template = Template()
    template.set_version(FORMAT_VERSION)
    if description:
        template.set_description(description)
    return template


def add_resources(template: Template, resources: Iterable[AWSObject]) -> List[AWSObject]:
    """
    Add a batch of resources atomically.

    Every title is checked before any resource is added, so a failure leaves
    the template unchanged.

    Raises:
        GraphMutationError: If any title is duplicated or already present
    """
    staged = list(resources)
    titles = [resource.title for resource in staged]
    duplicates = sorted({t for t in titles if titles.count(t) > 1 or t in template.resources})
    if duplicates:
        raise GraphMutationError(f"Resources already defined: {duplicates}", duplicates)

    added: List[AWSObject] = []
    try:
        for resource in staged:
            template.add_resource(resource)
            added.append(resource)
    except ValueError as e:
        for resource in added:
            del template.resources[resource.title]
        raise GraphMutationError(str(e), titles) from e
    return added


def referenced_names(value: Any) -> List[str]:
    """Collect logical names referenced through Ref and Fn::GetAtt."""
    names: List[str] = []
    if isinstance(value, dict):
        for key, inner in value.items():
            if key == "Ref" and isinstance(inner, str):
                # Pseudo parameters such as AWS::Region are not resources
                if not inner.startswith("AWS::"):
                    names.append(inner)
            elif key == "Fn::GetAtt" and isinstance(inner, list) and inner:
                names.append(inner[0])
            else:
                names.extend(referenced_names(inner))
    elif isinstance(value, list):
        for inner in value:
            names.extend(referenced_names(inner))
    return names


def depends_on(resource: AWSObject) -> List[str]:
    value = getattr(resource, "DependsOn", None)
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    return list(value)


def dependencies(template: Template) -> Dict[str, Set[str]]:
    """Explicit DependsOn edges, keyed by the dependent resource."""
    return {name: set(depends_on(resource)) for name, resource in template.resources.items()}


def references(template: Template) -> Dict[str, Set[str]]:
    """Implicit edges from Ref and Fn::GetAtt in resource properties."""
    return {
        name: set(referenced_names(encode_to_dict(resource.properties)))
        for name, resource in template.resources.items()
    }


def dangling_references(template: Template) -> Dict[str, Set[str]]:
    """Referenced logical names that are not defined in ``template``."""
    explicit = dependencies(template)
    implicit = references(template)
    defined = set(template.resources)
    dangling = {}
    for name in template.resources:
        targets = (explicit[name] | implicit[name]) - defined
        if targets:
            dangling[name] = targets
    return dangling
