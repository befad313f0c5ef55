import jinja2
from jinja2 import select_autoescape

from smoketesting.exceptions import InvalidSyntax, SystemSetupError


class TemplateRenderer:
    """
    Renders the configuration templates that ship in the package's resources directory.
    """

    def render_template_file(self, root_path, variables, file_name):
        """
        :param root_path: The directory containing ``file_name``.
        :param variables: Template variables. Referencing an unknown variable is an error.
        :return: The rendered template, always terminated by a new line.
        """
        env = jinja2.Environment(loader=jinja2.FileSystemLoader(root_path), autoescape=select_autoescape(['html', 'xml']),
                                 undefined=jinja2.StrictUndefined)
        try:
            template = env.get_template(file_name)
            # force a new line at the end. Jinja seems to remove it.
            return template.render(variables) + "\n"
        except jinja2.exceptions.TemplateSyntaxError as e:
            raise InvalidSyntax(f"Template [{file_name}] in [{root_path}] is invalid: {e}", e)
        except jinja2.exceptions.TemplateNotFound as e:
            raise SystemSetupError(f"Cannot find template [{file_name}] in [{root_path}].", e)
        except Exception as e:
            raise SystemSetupError(f"Cannot render template [{file_name}]: {e}", e)
