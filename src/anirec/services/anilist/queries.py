"""GraphQL documents sent to AniList.

Adult media is excluded from every list query.
"""

_MEDIA_SUMMARY_FIELDS = """
      id
      title {
        romaji
        english
        native
      }
      description
      coverImage {
        large
        medium
      }
      meanScore
      genres
      format
      episodes
      startDate {
        year
      }
      status
      popularity
"""

TRENDING_QUERY = f"""
query ($page: Int, $perPage: Int) {{
  Page(page: $page, perPage: $perPage) {{
    media(type: ANIME, sort: TRENDING_DESC, isAdult: false) {{{_MEDIA_SUMMARY_FIELDS}    }}
  }}
}}
"""

SEARCH_QUERY = f"""
query ($search: String, $page: Int, $perPage: Int) {{
  Page(page: $page, perPage: $perPage) {{
    media(search: $search, type: ANIME, sort: POPULARITY_DESC, isAdult: false) {{{_MEDIA_SUMMARY_FIELDS}    }}
  }}
}}
"""

DETAILS_QUERY = """
query ($id: Int) {
  Media(id: $id, type: ANIME) {
    id
    title {
      romaji
      english
      native
    }
    description
    coverImage {
      large
      medium
    }
    bannerImage
    meanScore
    genres
    format
    episodes
    duration
    status
    startDate {
      year
      month
      day
    }
    endDate {
      year
      month
      day
    }
    season
    studios {
      nodes {
        name
      }
    }
    characters(page: 1, perPage: 6, sort: ROLE) {
      nodes {
        name {
          full
        }
        image {
          medium
        }
      }
    }
    relations {
      nodes {
        id
        title {
          romaji
          english
        }
        coverImage {
          medium
        }
        format
      }
    }
    externalLinks {
      url
      site
    }
    trailer {
      id
      site
    }
    popularity
    favourites
  }
}
"""
