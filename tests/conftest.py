import pytest

from newsel.models import SiteConfig
from newsel.storage import SiteConfigStore


@pytest.fixture
def article_html():
    return """
    <!DOCTYPE html>
    <html lang="es">
    <head>
        <title>Test Page</title>
        <meta property="article:published_time" content="2024-05-02T10:00:00Z">
    </head>
    <body>
        <header><h1 class="site-name">Diario Ejemplo</h1></header>
        <article>
            <h1 class="headline">  Gobierno anuncia
                nuevo plan  </h1>
            <span class="byline">Por Ana Pérez</span>
            <time class="published" datetime="2024-05-02">2 de mayo</time>
            <figure class="lead"><img data-src="/img/lead.jpg" alt="lead"></figure>
            <div class="article-body">
                <p>Primer párrafo.</p>
                <p>PUBLICIDAD</p>
                <p>Segundo párrafo.</p>
            </div>
            <img class="inline" src="https://cdn.example.com/a.png">
        </article>
    </body>
    </html>
    """


@pytest.fixture
def listing_html():
    return """
    <html>
    <body>
        <section class="news">
            <article class="teaser">
                <h2><a href="/politica/nota-1">Nota uno</a></h2>
                <p class="summary">Resumen uno</p>
            </article>
            <article class="teaser">
                <h2><a href="https://www.example.com/politica/nota-2#comments">Nota dos</a></h2>
            </article>
            <article class="teaser">
                <span>Sin enlace</span>
            </article>
            <article class="teaser">
                <h2><a href="/politica/nota-1">Nota uno (repetida)</a></h2>
            </article>
        </section>
    </body>
    </html>
    """


@pytest.fixture
def site_config_data():
    return {
        'domain': 'https://www.Example.com/',
        'name': 'Diario Ejemplo',
        'enabled': True,
        'priority': 2,
        'selectors': {
            'listing': {
                'container': ['.missing-list', 'article.teaser'],
                'title': ['h2'],
                'link': ['h2 a'],
                'description': ['.summary'],
            },
            'article': {
                'title': ['.missing', 'h1.headline'],
                'content': ['.article-body'],
                'date': ['time.published'],
                'author': ['.byline'],
                'images': ['figure.lead', 'img.inline'],
            },
        },
        'cleaningRules': [{'type': 'strip', 'pattern': 'PUBLICIDAD', 'description': 'Ad marker'}],
        'metadata': {'encoding': 'utf-8', 'language': 'es'},
    }


@pytest.fixture
def site_config(site_config_data):
    return SiteConfig.from_dict({**site_config_data, 'domain': 'example.com'})


@pytest.fixture
def store(site_config):
    return SiteConfigStore([site_config])


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line('markers', 'integration: marks tests as integration tests')
    config.addinivalue_line('markers', 'unit: marks tests as unit tests')


def pytest_collection_modifyitems(config, items):
    """Apply directory-based marks to collected test items."""

    for item in items:
        if hasattr(item, 'fspath'):
            file_path = str(item.fspath)

            if '/tests/integration/' in file_path:
                item.add_marker(pytest.mark.integration)
            elif '/tests/unit/' in file_path:
                item.add_marker(pytest.mark.unit)
