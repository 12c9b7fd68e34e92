from infrastructure.template.base_loader import DictTemplateLoader, TemplateLoaderBase
from infrastructure.template.json_loader import JsonTemplateLoader
from infrastructure.template.loader_registry import TemplateLoaderRegistry
from infrastructure.template.serializer import dump_template, dump_templates
from infrastructure.template.yaml_loader import YamlTemplateLoader

__all__ = [
    "DictTemplateLoader",
    "TemplateLoaderBase",
    "TemplateLoaderRegistry",
    "YamlTemplateLoader",
    "JsonTemplateLoader",
    "dump_template",
    "dump_templates",
]
