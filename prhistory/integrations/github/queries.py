"""
GraphQL queries for the GitHub v4 API.
"""

# Merged PRs with their commits, newest first. One page = 100 PRs.
MERGED_PULL_REQUESTS_QUERY = """
    query($owner: String!, $repo: String!, $after: String) {
      repository(owner: $owner, name: $repo) {
        pullRequests(first: 100, after: $after, states: MERGED, orderBy: {field: UPDATED_AT, direction: DESC}) {
          pageInfo {
            hasNextPage
            endCursor
          }
          nodes {
            number
            title
            body
            url
            mergedAt
            mergeCommit {
              oid
            }
            author {
              __typename
              login
              url
            }
            commits(first: 250) {
              nodes {
                commit {
                  oid
                  message
                  authoredDate
                  author {
                    name
                    email
                  }
                  parents(first: 2) {
                    nodes {
                      oid
                    }
                  }
                }
              }
            }
          }
        }
      }
    }
    """
