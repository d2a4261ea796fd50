"""forgekit - 第三方包获取与构建产物复用"""

__version__ = "0.1.0"
