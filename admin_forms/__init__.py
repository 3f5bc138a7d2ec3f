"""admin-forms.

后台资源的声明式表单行为: 创建、编辑、预览页面与保存、删除处理.
"""

from admin_forms.settings import APP_VERSION

__version__ = APP_VERSION

__all__ = ["__version__"]
