"""Search index client.

``SearchIndex`` is the narrow interface the rest of the app talks to;
``MeilisearchIndex`` implements it against the Meilisearch HTTP API with
``requests``. Tests swap in an in-memory implementation through
``app.extensions["search_index"]``.
"""
import requests

INDEX_SETTINGS = {
    "searchableAttributes": ["first_name", "headline", "skills", "city", "province"],
    "filterableAttributes": [
        "city",
        "province",
        "skills",
        "live_in_out",
        "experience_band",
        "salary_min",
        "salary_max",
        "availability_ts",
    ],
    "sortableAttributes": ["updated_at", "salary_min", "salary_max", "years_of_experience"],
    "rankingRules": ["words", "typo", "proximity", "attribute", "sort", "exactness"],
    "synonyms": {
        "yaya": ["childcare", "babysitter", "nanny"],
        "elderly care": ["caregiver", "senior care"],
        "laundry": ["ironing", "washing"],
        "katulong": ["housekeeper", "maid", "helper"],
        "kasambahay": ["housekeeper", "domestic helper"],
        "cook": ["cooking", "chef", "luto"],
        "driver": ["driving", "chauffeur", "tsuper"],
        "gardener": ["gardening", "landscaping", "hardinero"],
        "pet care": ["animal care", "alaga ng hayop"],
        "ironing": ["pressing", "plantsa"],
    },
    "stopWords": ["the", "a", "an", "and", "or", "but", "in", "on", "at", "to", "for", "of", "with", "by"],
    "typoTolerance": {
        "enabled": True,
        "minWordSizeForTypos": {"oneTypo": 4, "twoTypos": 8},
    },
    "faceting": {"maxValuesPerFacet": 100, "sortFacetValuesBy": {"*": "alpha"}},
    "pagination": {"maxTotalHits": 10000},
}


class SearchIndexError(Exception):
    pass


class SearchIndex:
    """Operations the app needs from the hosted search engine."""

    def add_documents(self, documents):
        raise NotImplementedError

    def delete_documents(self, ids):
        raise NotImplementedError

    def delete_all_documents(self):
        raise NotImplementedError

    def search(self, query="", filter=None, sort=None, facets=None, page=1, hits_per_page=20,
               attributes_to_retrieve=None):
        """Return a Meilisearch-shaped result: hits, totalHits, totalPages,
        page, facetDistribution, processingTimeMs."""
        raise NotImplementedError

    def stats(self):
        raise NotImplementedError

    def configure(self, settings=None):
        raise NotImplementedError

    def is_healthy(self):
        raise NotImplementedError


class MeilisearchIndex(SearchIndex):
    def __init__(self, host, api_key=None, index_name="employees_public", timeout=10, session=None):
        self.host = host.rstrip("/")
        self.index_name = index_name
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers["Content-Type"] = "application/json"
        if api_key:
            self.session.headers["Authorization"] = f"Bearer {api_key}"

    def _url(self, path):
        return f"{self.host}/indexes/{self.index_name}{path}"

    def _request(self, method, url, **kwargs):
        try:
            r = self.session.request(method, url, timeout=self.timeout, **kwargs)
            r.raise_for_status()
        except requests.RequestException as e:
            raise SearchIndexError(f"{method} {url} failed: {e}") from e
        return r.json() if r.content else {}

    def add_documents(self, documents):
        if not documents:
            return None
        return self._request("POST", self._url("/documents"), params={"primaryKey": "id"}, json=list(documents))

    def delete_documents(self, ids):
        ids = list(ids)
        if not ids:
            return None
        return self._request("POST", self._url("/documents/delete-batch"), json=ids)

    def delete_all_documents(self):
        return self._request("DELETE", self._url("/documents"))

    def search(self, query="", filter=None, sort=None, facets=None, page=1, hits_per_page=20,
               attributes_to_retrieve=None):
        body = {"q": query or "", "page": page, "hitsPerPage": hits_per_page}
        if filter:
            body["filter"] = filter
        if sort:
            body["sort"] = sort
        if facets:
            body["facets"] = facets
        if attributes_to_retrieve:
            body["attributesToRetrieve"] = attributes_to_retrieve
        return self._request("POST", self._url("/search"), json=body)

    def stats(self):
        return self._request("GET", self._url("/stats"))

    def configure(self, settings=None):
        # creating an existing index is a no-op task on the engine side
        self._request("POST", f"{self.host}/indexes", json={"uid": self.index_name, "primaryKey": "id"})
        return self._request("PATCH", self._url("/settings"), json=settings or INDEX_SETTINGS)

    def is_healthy(self):
        try:
            return self._request("GET", f"{self.host}/health").get("status") == "available"
        except SearchIndexError:
            return False
