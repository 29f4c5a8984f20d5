from ._static import StaticDemandRepository as StaticDemandRepository
from ._yaml import YamlDemandRepository as YamlDemandRepository
