"""版本信息"""

__version__ = "0.3.0"
__author__ = "yafo-ai"
__description__ = "商品分类树工具库：建树、搜索过滤、父分类候选、展平与选中态维护"
