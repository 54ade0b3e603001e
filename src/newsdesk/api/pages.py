"""HTML pages for the feed and bookmark views served by the API."""

from __future__ import annotations

_BASE_STYLE = """
      :root {
        color-scheme: light;
        font-family: system-ui, -apple-system, BlinkMacSystemFont, "Segoe UI", sans-serif;
        --color-paper: #f6f4ef;
        --color-ink: #1f2933;
        --color-accent: #2f6fde;
        --color-muted: #6b7280;
        --color-error: #c0392b;
        background: var(--color-paper);
        color: var(--color-ink);
      }

      body {
        margin: 0;
      }

      header {
        display: flex;
        align-items: center;
        justify-content: space-between;
        padding: 20px 40px;
        background: white;
        box-shadow: 0 4px 16px rgba(31, 41, 51, 0.08);
      }

      header nav a {
        margin-left: 20px;
        color: var(--color-accent);
        text-decoration: none;
        font-weight: 600;
      }

      main {
        max-width: 1120px;
        margin: 0 auto;
        padding: 32px 24px 64px;
      }

      .grid {
        display: grid;
        grid-template-columns: repeat(auto-fill, minmax(300px, 1fr));
        gap: 24px;
      }

      .card {
        background: white;
        border-radius: 16px;
        overflow: hidden;
        box-shadow: 0 12px 30px rgba(31, 41, 51, 0.08);
        display: flex;
        flex-direction: column;
      }

      .card img {
        width: 100%;
        height: 170px;
        object-fit: cover;
      }

      .card .body {
        padding: 16px 20px;
        display: grid;
        gap: 8px;
        flex: 1;
      }

      .card h3 {
        margin: 0;
        font-size: 1.05rem;
      }

      .card .meta {
        color: var(--color-muted);
        font-size: 0.85rem;
      }

      .card .actions {
        display: flex;
        gap: 8px;
        padding: 0 20px 16px;
      }

      button {
        appearance: none;
        border: none;
        border-radius: 10px;
        padding: 10px 18px;
        font-weight: 600;
        cursor: pointer;
        background: var(--color-accent);
        color: white;
      }

      button:disabled {
        opacity: 0.6;
        cursor: wait;
      }

      .center {
        display: flex;
        justify-content: center;
        margin-top: 32px;
      }

      .error {
        color: var(--color-error);
        text-align: center;
        font-weight: 600;
      }

      .toast {
        position: fixed;
        left: 24px;
        bottom: 24px;
        padding: 12px 18px;
        border-radius: 10px;
        background: var(--color-ink);
        color: white;
        opacity: 0;
        transition: opacity 0.2s ease;
      }

      .toast.visible {
        opacity: 1;
      }

      .toast.error {
        background: var(--color-error);
      }
"""

_SHARED_SCRIPT = """
      const toast = document.getElementById("toast");
      let toastTimer = null;

      function notify(message, severity) {
        toast.textContent = message;
        toast.className = "toast visible" + (severity === "error" ? " error" : "");
        clearTimeout(toastTimer);
        toastTimer = setTimeout(() => {
          toast.className = "toast";
        }, 6000);
      }

      function safeUrl(value) {
        if (!value) {
          return null;
        }
        try {
          const parsed = new URL(value);
          return parsed.protocol === "http:" || parsed.protocol === "https:" ? parsed.href : null;
        } catch (error) {
          return null;
        }
      }

      function articleCard(article, actionLabel, onAction) {
        const card = document.createElement("article");
        card.className = "card";

        const imageUrl = safeUrl(article.urlToImage);
        if (imageUrl) {
          const image = document.createElement("img");
          image.src = imageUrl;
          image.alt = "";
          card.appendChild(image);
        }

        const body = document.createElement("div");
        body.className = "body";

        const title = document.createElement("h3");
        const articleUrl = safeUrl(article.url);
        if (articleUrl) {
          const link = document.createElement("a");
          link.href = articleUrl;
          link.target = "_blank";
          link.rel = "noopener";
          link.textContent = article.title || article.url;
          title.appendChild(link);
        } else {
          title.textContent = article.title || article.url || "";
        }
        body.appendChild(title);

        if (article.description) {
          const description = document.createElement("p");
          description.textContent = article.description;
          body.appendChild(description);
        }

        const meta = document.createElement("div");
        meta.className = "meta";
        const source = article.source && article.source.name ? article.source.name : "";
        const published = article.publishedAt ? new Date(article.publishedAt).toLocaleString() : "";
        meta.textContent = [source, article.author, published].filter(Boolean).join(" · ");
        body.appendChild(meta);
        card.appendChild(body);

        const actions = document.createElement("div");
        actions.className = "actions";
        const button = document.createElement("button");
        button.textContent = actionLabel;
        button.addEventListener("click", () => onAction(button));
        actions.appendChild(button);
        card.appendChild(actions);

        return card;
      }
"""

FEED_HTML = f"""
<!DOCTYPE html>
<html lang="en">
  <head>
    <meta charset="utf-8" />
    <meta name="viewport" content="width=device-width, initial-scale=1" />
    <title>Newsdesk</title>
    <style>{_BASE_STYLE}
    </style>
  </head>
  <body>
    <header>
      <strong>Newsdesk</strong>
      <nav><a href="/">Latest</a><a href="/saved">Saved</a></nav>
    </header>
    <main>
      <h1>Latest News</h1>
      <p id="error" class="error" hidden></p>
      <section id="articles" class="grid"></section>
      <p id="empty" class="center" hidden>No articles found. Please try again later.</p>
      <div class="center">
        <button id="load-more" hidden>Load More</button>
      </div>
    </main>
    <div id="toast" class="toast"></div>
    <script>{_SHARED_SCRIPT}
      const PAGE_SIZE = 12;
      const grid = document.getElementById("articles");
      const loadMore = document.getElementById("load-more");
      const errorBox = document.getElementById("error");
      const empty = document.getElementById("empty");

      // idle -> loading -> loaded | errored
      let state = {{ status: "idle", articles: [], page: 0, totalResults: 0, error: null }};

      function appendArticles(previous, page, result) {{
        return {{
          status: "loaded",
          articles: previous.articles.concat(result.articles || []),
          page: page,
          totalResults: result.totalResults || 0,
          error: null,
        }};
      }}

      function canLoadMore(current) {{
        return current.status === "loaded" && current.articles.length < current.totalResults;
      }}

      async function saveArticle(article, button) {{
        button.disabled = true;
        try {{
          const response = await fetch("/api/save-article", {{
            method: "POST",
            headers: {{ "Content-Type": "application/json" }},
            body: JSON.stringify(article),
          }});
          const payload = await response.json();
          if (payload.success) {{
            notify("Article saved", "success");
            button.textContent = "Saved";
            return;
          }}
          notify(payload.message || "Failed to save article", "error");
        }} catch (error) {{
          notify("Failed to save article", "error");
        }}
        button.disabled = false;
      }}

      function render(previousCount) {{
        for (const article of state.articles.slice(previousCount)) {{
          grid.appendChild(articleCard(article, "Save", (button) => saveArticle(article, button)));
        }}
        errorBox.hidden = state.status !== "errored";
        errorBox.textContent = state.error || "";
        empty.hidden = !(state.status === "loaded" && state.articles.length === 0);
        loadMore.hidden = !(canLoadMore(state) || state.status === "loading") || state.status === "errored";
        loadMore.disabled = state.status === "loading";
      }}

      async function loadPage() {{
        if (state.status === "loading" || state.status === "errored") {{
          return;
        }}
        if (state.status === "loaded" && !canLoadMore(state)) {{
          return;
        }}

        const previousCount = state.articles.length;
        const nextPage = state.page + 1;
        state = {{ ...state, status: "loading" }};
        render(previousCount);

        try {{
          const response = await fetch(`/api/all-news?page=${{nextPage}}&pageSize=${{PAGE_SIZE}}`);
          const payload = await response.json();
          if (payload.success) {{
            state = appendArticles(state, nextPage, payload.data);
          }} else {{
            state = {{ ...state, status: "errored", error: payload.message || "An error occurred" }};
          }}
        }} catch (error) {{
          state = {{ ...state, status: "errored", error: "Failed to fetch news. Please try again later." }};
        }}
        render(previousCount);
      }}

      loadMore.addEventListener("click", loadPage);
      loadPage();
    </script>
  </body>
</html>
"""

SAVED_HTML = f"""
<!DOCTYPE html>
<html lang="en">
  <head>
    <meta charset="utf-8" />
    <meta name="viewport" content="width=device-width, initial-scale=1" />
    <title>Newsdesk · Saved Articles</title>
    <style>{_BASE_STYLE}
    </style>
  </head>
  <body>
    <header>
      <strong>Newsdesk</strong>
      <nav><a href="/">Latest</a><a href="/saved">Saved</a></nav>
    </header>
    <main>
      <h1>Saved Articles</h1>
      <p id="error" class="error" hidden></p>
      <p id="empty" class="center" hidden>No saved articles found. Try saving some articles from the home page!</p>
      <section id="articles" class="grid"></section>
    </main>
    <div id="toast" class="toast"></div>
    <script>{_SHARED_SCRIPT}
      const grid = document.getElementById("articles");
      const errorBox = document.getElementById("error");
      const empty = document.getElementById("empty");
      let savedArticles = [];

      function render() {{
        grid.replaceChildren(
          ...savedArticles.map((article) =>
            articleCard(article, "Delete", (button) => deleteArticle(article.id, button))
          )
        );
        empty.hidden = savedArticles.length !== 0;
      }}

      async function deleteArticle(id, button) {{
        button.disabled = true;
        try {{
          const response = await fetch(`/api/saved-articles/${{encodeURIComponent(id)}}`, {{ method: "DELETE" }});
          const payload = await response.json();
          if (!payload.success) {{
            throw new Error(payload.message || "Failed to delete article");
          }}
          savedArticles = savedArticles.filter((article) => article.id !== id);
          render();
          notify("Article deleted successfully", "success");
        }} catch (error) {{
          button.disabled = false;
          notify("Failed to delete article", "error");
        }}
      }}

      async function loadSaved() {{
        try {{
          const response = await fetch("/api/saved-articles");
          const payload = await response.json();
          if (!payload.success) {{
            errorBox.textContent = payload.message || "Failed to fetch saved articles";
            errorBox.hidden = false;
            return;
          }}
          savedArticles = payload.data;
          render();
        }} catch (error) {{
          errorBox.textContent = "Failed to fetch saved articles. Please try again later.";
          errorBox.hidden = false;
        }}
      }}

      loadSaved();
    </script>
  </body>
</html>
"""
