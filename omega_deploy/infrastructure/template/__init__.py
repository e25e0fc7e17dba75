"""Bootstrap template storage and expansion."""
from omega_deploy.infrastructure.template.expander import BootstrapTemplateExpander, expand
from omega_deploy.infrastructure.template.store import PackageTemplateStore, TemplateStore

__all__ = ["BootstrapTemplateExpander", "PackageTemplateStore", "TemplateStore", "expand"]
