# pageimages/services/repository.py
# Responsibility: Encapsulates database access to wiki pages, links, files and page properties.

from typing import Dict, Iterable, List, Optional, Tuple, TypedDict

from psycopg2.extras import RealDictCursor

from pageimages.services.db import DBTransaction
from pageimages.services.titles import NS_FILE

# Page property holding the chosen image's file key
PROP_NAME = "page_image"


class PageRow(TypedDict):
    page_id: int
    namespace: int
    title: str


class FileRow(TypedDict):
    name: str
    width: int
    height: int


class PageImageRepository:
    """
    Data Access Layer for the 'page', 'pagelinks', 'image' and 'page_props' tables.
    """

    # ---------------------------
    # Pages
    # ---------------------------
    def get_pages(self, page_ids: Iterable[int]) -> Dict[int, PageRow]:
        """Returns existing pages keyed by id."""
        ids = list(page_ids)
        if not ids:
            return {}
        sql = """
            SELECT page_id, page_namespace AS namespace, page_title AS title
            FROM page
            WHERE page_id = ANY(%s)
        """
        with DBTransaction() as conn:
            with conn.cursor(cursor_factory=RealDictCursor) as cur:
                cur.execute(sql, (ids,))
                return {row["page_id"]: PageRow(**row) for row in cur.fetchall()}

    def find_page_id(self, namespace: int, title: str, database: Optional[str] = None) -> Optional[int]:
        sql = "SELECT page_id FROM page WHERE page_namespace = %s AND page_title = %s"
        with DBTransaction(database) as conn:
            with conn.cursor() as cur:
                cur.execute(sql, (namespace, title))
                row = cur.fetchone()
                return row[0] if row else None

    def find_page_ids(self, titles: Iterable[Tuple[int, str]]) -> Dict[Tuple[int, str], int]:
        """Maps (namespace, db key) pairs to page ids for the pages that exist."""
        found: Dict[Tuple[int, str], int] = {}
        wanted = list(titles)
        if not wanted:
            return found
        sql = """
            SELECT page_id, page_namespace, page_title
            FROM page
            WHERE (page_namespace, page_title) IN %s
        """
        with DBTransaction() as conn:
            with conn.cursor() as cur:
                cur.execute(sql, (tuple(wanted),))
                for page_id, namespace, title in cur.fetchall():
                    found[(namespace, title)] = page_id
        return found

    # ---------------------------
    # Links
    # ---------------------------
    def get_file_links(self, page_id: int, database: Optional[str] = None) -> List[str]:
        """Returns the titles of all File pages linked from a page."""
        sql = "SELECT pl_title FROM pagelinks WHERE pl_from = %s AND pl_namespace = %s"
        with DBTransaction(database) as conn:
            with conn.cursor() as cur:
                cur.execute(sql, (page_id, NS_FILE))
                return [row[0] for row in cur.fetchall()]

    # ---------------------------
    # Files
    # ---------------------------
    def get_files(self, names: Iterable[str]) -> Dict[str, FileRow]:
        keys = list(dict.fromkeys(names))
        if not keys:
            return {}
        sql = """
            SELECT img_name AS name, img_width AS width, img_height AS height
            FROM image
            WHERE img_name = ANY(%s)
        """
        with DBTransaction() as conn:
            with conn.cursor(cursor_factory=RealDictCursor) as cur:
                cur.execute(sql, (keys,))
                return {row["name"]: FileRow(**row) for row in cur.fetchall()}

    # ---------------------------
    # Page properties
    # ---------------------------
    def get_page_images(self, page_ids: Iterable[int]) -> Dict[int, str]:
        ids = list(page_ids)
        if not ids:
            return {}
        sql = """
            SELECT pp_page, pp_value
            FROM page_props
            WHERE pp_page = ANY(%s) AND pp_propname = %s
        """
        with DBTransaction() as conn:
            with conn.cursor() as cur:
                cur.execute(sql, (ids, PROP_NAME))
                return {page_id: value for page_id, value in cur.fetchall()}

    def get_page_image(self, page_id: int) -> Optional[str]:
        return self.get_page_images([page_id]).get(page_id)

    def set_page_image(self, page_id: int, file_key: str) -> None:
        sql = """
            INSERT INTO page_props (pp_page, pp_propname, pp_value)
            VALUES (%s, %s, %s)
            ON CONFLICT (pp_page, pp_propname) DO UPDATE SET
                pp_value = EXCLUDED.pp_value
        """
        with DBTransaction() as conn:
            with conn.cursor() as cur:
                cur.execute(sql, (page_id, PROP_NAME, file_key))

    def clear_page_image(self, page_id: int) -> None:
        sql = "DELETE FROM page_props WHERE pp_page = %s AND pp_propname = %s"
        with DBTransaction() as conn:
            with conn.cursor() as cur:
                cur.execute(sql, (page_id, PROP_NAME))
