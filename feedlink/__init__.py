"""feedlink - 私有制品源（Azure Artifacts universal packages）依赖拉取插件"""

__version__ = "0.3.0"
