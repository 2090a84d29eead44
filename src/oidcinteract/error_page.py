from oidcinteract.template_handler import Jinja2TemplateHandler

ERROR_TITLE = "oops! something went wrong"

ERROR_PAGE = """<!DOCTYPE html>
<head>
  <meta charset="utf-8">
  <title>{{ title }}</title>
  <meta name="viewport" content="width=device-width, initial-scale=1, shrink-to-fit=no">
  <meta http-equiv="x-ua-compatible" content="ie=edge">
  <style>
    @import url(https://fonts.googleapis.com/css?family=Roboto:400,100);h1{font-weight:100;text-align:center;font-size:2.3em}body{font-family:Roboto,sans-serif;margin-top:25px;margin-bottom:25px}.container{padding:0 40px 10px;width:274px;background-color:#F7F7F7;margin:0 auto 10px;border-radius:2px;box-shadow:0 2px 2px rgba(0,0,0,.3);overflow:hidden}pre{white-space:pre-wrap;white-space:-moz-pre-wrap;white-space:-pre-wrap;white-space:-o-pre-wrap;word-wrap:break-word;margin:0 0 0 1em;text-indent:-1em}
  </style>
</head>
<body>
  <div class="container">
    <h1>{{ title }}</h1>
    {% for key, value in out %}<pre><strong>{{ key }}</strong>: {{ value }}</pre>{% endfor %}
  </div>
</body>
</html>"""

_handler = Jinja2TemplateHandler.from_strings(**{"error.html": ERROR_PAGE})


def render_error(out):
    """
    Static HTML page listing the items of `out`, typically 'error' and
    'error_description'.

    :param out: A dictionary
    :return: The page as a string
    """
    return _handler.render("error.html", title=ERROR_TITLE, out=list(out.items()))
